# mtengine/main.py
import argparse
import logging
import sys
import time

from mtengine.application.analysis.seed_search import SeedSearch
from mtengine.application.registry.handle_registry import HandleRegistry
from mtengine.domain.engine.errors import MersenneTwisterError
from mtengine.domain.engine.params import params_for_width
from mtengine.infrastructure.concurrency.task_executor import ExecutionMode, TaskExecutor
from mtengine.infrastructure.config.engine_config import load_engine_config
from mtengine.infrastructure.config.loaders.yaml_loader import ConfigError
from mtengine.infrastructure.logging.log_manager import initialize_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2
EXIT_INTERRUPTED = 130


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Mersenne Twister engine (MT19937 / MT19937-64). Not cryptographically secure."
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to YAML configuration file (e.g. config/default.yaml)"
    )
    parser.add_argument(
        "--action",
        choices=["generate", "recover"],
        default="generate",
        help="'generate' prints output words, 'recover' brute-forces a seed"
    )
    parser.add_argument("-w", "--width", type=int, choices=[32, 64], help="Word width")
    parser.add_argument("-s", "--seed", type=int, help="Seed (default seed when omitted)")
    parser.add_argument("-n", "--count", type=int, help="Number of words to generate")

    parser.add_argument("--output", type=int, help="Observed output word to recover a seed for")
    parser.add_argument("--nth", type=int, default=0, help="Zero-based position of the observed output")
    parser.add_argument("--start", type=int, default=0, help="First seed to try")
    parser.add_argument("--stop", type=int, default=1 << 16, help="One past the last seed to try")

    parser.add_argument(
        "--no-concurrency",
        action="store_true",
        help="Run seed searches sequentially"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    return parser.parse_args(argv)


def apply_overrides(config, args):
    """Fold command line options into the loaded configuration."""
    engine_config = config["engine"]
    if args.width is not None:
        engine_config["width"] = args.width
    if args.seed is not None:
        engine_config["seed"] = args.seed
    if args.count is not None:
        engine_config["count"] = args.count

    if args.no_concurrency:
        config["concurrency"]["mode"] = "sequential"

    if args.verbose:
        config["logging"]["level"] = "DEBUG"
        config["logging"]["console_level"] = "DEBUG"

    return config


def run_generate(registry, config, out):
    engine_config = config["engine"]
    width = engine_config["width"]

    handle = registry.create(width, engine_config["seed"])
    try:
        for _ in range(engine_config["count"]):
            print(registry.generate(handle, width), file=out)
    finally:
        registry.release(handle, width)
    return EXIT_OK


def run_recover(config, args, out):
    logger = logging.getLogger("main")
    if args.output is None:
        logger.error("--output is required for --action recover")
        return EXIT_ERROR

    concurrency = config["concurrency"]
    executor = TaskExecutor(ExecutionMode.from_name(concurrency["mode"]), concurrency["max_workers"])
    search = SeedSearch(executor, config["search"]["chunk_size"])

    params = params_for_width(config["engine"]["width"])
    seed = search.search(args.output, args.start, args.stop, args.nth, params)
    if seed is None:
        print("not found", file=out)
        return EXIT_NOT_FOUND

    print(seed, file=out)
    return EXIT_OK


def main(argv=None, out=None):
    """Main entry point for the mtengine command."""
    args = parse_arguments(argv)
    out = out or sys.stdout
    start_time = time.time()

    try:
        config = load_engine_config(args.config)
    except ConfigError as e:
        print(f"Error loading configuration: {str(e)}", file=sys.stderr)
        return EXIT_ERROR

    config = apply_overrides(config, args)

    initialize_logging(config["logging"])
    logger = logging.getLogger("main")
    logger.info(f"mtengine starting ({args.action}, width={config['engine']['width']})")

    registry = HandleRegistry(config["registry"]["max_handles"])

    try:
        if args.action == "recover":
            return run_recover(config, args, out)
        return run_generate(registry, config, out)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except (MersenneTwisterError, ValueError) as e:
        logger.error(f"Error: {str(e)}")
        return EXIT_ERROR
    finally:
        registry.release_all()
        logger.info(f"Finished in {time.time() - start_time:.2f} seconds")


if __name__ == "__main__":
    sys.exit(main())
