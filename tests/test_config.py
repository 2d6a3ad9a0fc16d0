# tests/test_config.py
import logging
import os
import shutil
import sys
import tempfile
import unittest

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mtengine.infrastructure.config.engine_config import SCHEMA_PATH, load_engine_config
from mtengine.infrastructure.config.loaders.yaml_loader import (
    ConfigError,
    FileNotFoundConfigError,
    SchemaValidationError,
    YamlConfigLoader,
    YamlParseError,
)
from mtengine.infrastructure.config.validators.schema_validator import SchemaValidator
from mtengine.infrastructure.logging.log_manager import LogManager

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


class TestEngineConfig(unittest.TestCase):
    """YAML loading, schema validation and defaults."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _write(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_schema_defaults(self):
        config = load_engine_config()
        self.assertEqual(config["engine"], {"width": 32, "seed": None, "count": 10})
        self.assertIsNone(config["registry"]["max_handles"])
        self.assertEqual(config["concurrency"]["mode"], "multiprocess")
        self.assertEqual(config["search"]["chunk_size"], 4096)
        self.assertEqual(config["logging"]["file"]["enabled"], False)

    def test_shipped_default_config(self):
        config = load_engine_config(os.path.join(REPO_ROOT, "config", "default.yaml"))
        self.assertEqual(config["engine"]["seed"], 5489)
        self.assertEqual(config["registry"]["max_handles"], 1024)

    def test_partial_file_gets_defaults(self):
        path = self._write("partial.yaml", "engine:\n  width: 64\n")
        config = load_engine_config(path)
        self.assertEqual(config["engine"]["width"], 64)
        self.assertEqual(config["engine"]["count"], 10)
        self.assertEqual(config["search"]["chunk_size"], 4096)

    def test_invalid_width(self):
        path = self._write("bad.yaml", "engine:\n  width: 48\n")
        with self.assertRaises(SchemaValidationError) as ctx:
            load_engine_config(path)
        self.assertTrue(any("engine.width" in e for e in ctx.exception.errors))

    def test_unknown_key(self):
        path = self._write("extra.yaml", "engine:\n  colour: blue\n")
        with self.assertRaises(SchemaValidationError):
            load_engine_config(path)

    def test_non_strict_keeps_going(self):
        path = self._write("bad.yaml", "concurrency:\n  mode: gpu\n")
        config = load_engine_config(path, strict=False)
        self.assertEqual(config["concurrency"]["mode"], "gpu")

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundConfigError):
            load_engine_config(os.path.join(self.temp_dir, "missing.yaml"))

        config = load_engine_config(os.path.join(self.temp_dir, "missing.yaml"), strict=False)
        self.assertEqual(config["engine"]["width"], 32)

    def test_parse_error(self):
        path = self._write("broken.yaml", "engine: [width: 32\n")
        with self.assertRaises(YamlParseError):
            load_engine_config(path)

    def test_empty_file(self):
        path = self._write("empty.yaml", "")
        config = load_engine_config(path)
        self.assertEqual(config["engine"]["width"], 32)


class TestYamlConfigLoader(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.loader = YamlConfigLoader(SchemaValidator())

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_load_with_fallbacks(self):
        good = os.path.join(self.temp_dir, "good.yaml")
        with open(good, 'w', encoding='utf-8') as f:
            f.write("engine:\n  seed: 1\n")

        config = self.loader.load_with_fallbacks([os.path.join(self.temp_dir, "nope.yaml"), good], SCHEMA_PATH)
        self.assertEqual(config["engine"]["seed"], 1)
        self.assertTrue(self.loader.strict_mode)

    def test_load_with_fallbacks_all_fail(self):
        missing = [os.path.join(self.temp_dir, "a.yaml"), os.path.join(self.temp_dir, "b.yaml")]
        with self.assertRaises(ConfigError):
            self.loader.load_with_fallbacks(missing)

        self.assertEqual(self.loader.set_strict_mode(False).load_with_fallbacks(missing), {})

    def test_missing_schema(self):
        with self.assertRaises(FileNotFoundConfigError):
            self.loader.load_schema(os.path.join(self.temp_dir, "schema.json"))


class TestLogManager(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.manager = LogManager()
        self.saved_handlers = list(logging.getLogger().handlers)
        self.saved_level = logging.getLogger().level

    def tearDown(self):
        self.manager.reset()
        root = logging.getLogger()
        for handler in self.saved_handlers:
            root.addHandler(handler)
        root.setLevel(self.saved_level)
        shutil.rmtree(self.temp_dir)

    def test_initialize_with_file_and_loggers(self):
        log_path = os.path.join(self.temp_dir, "logs", "engine.log")
        self.manager.initialize({
            'level': 'debug',
            'console': False,
            'file': {'enabled': True, 'path': log_path},
            'loggers': {'application.registry': {'level': 'WARNING', 'propagate': True}},
        })

        self.assertTrue(self.manager.initialized)
        self.assertIn('file', self.manager.handlers)
        self.assertNotIn('console', self.manager.handlers)
        self.assertEqual(logging.getLogger('application.registry').level, logging.WARNING)

        logging.getLogger('test.config').debug("hello")
        self.manager.handlers['file'].flush()
        with open(log_path, encoding='utf-8') as f:
            self.assertIn("hello", f.read())

    def test_initialize_only_once(self):
        self.manager.initialize({'console': True})
        handler = self.manager.handlers['console']
        self.manager.initialize({'console': True, 'level': 'DEBUG'})
        self.assertIs(self.manager.handlers['console'], handler)

    def test_level_names(self):
        self.assertEqual(self.manager._get_log_level('warn'), logging.WARNING)
        self.assertEqual(self.manager._get_log_level(15), 15)
        self.assertEqual(self.manager._get_log_level('bogus'), logging.INFO)


if __name__ == "__main__":
    unittest.main()
