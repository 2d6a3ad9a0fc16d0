# mtengine/application/registry/handle_registry.py
import itertools
import logging
import threading
from typing import Dict, List, Optional, Tuple

from mtengine.domain.engine.errors import MersenneTwisterError
from mtengine.domain.engine.mersenne_twister import MersenneTwister, create_engine
from mtengine.domain.engine.params import params_for_width


class HandleError(MersenneTwisterError):
    """Base class for errors at the handle boundary."""
    pass


class InvalidHandleError(HandleError):
    """The handle is unknown, already released, or belongs to another word width."""
    def __init__(self, handle, width=None):
        self.handle = handle
        self.width = width
        suffix = f" for {width}-bit engines" if width is not None else ""
        self.message = f"Invalid engine handle: {handle!r}{suffix}"
        super().__init__(self.message)


class AllocationFailureError(HandleError):
    """Engine state could not be allocated."""
    pass


class HandleRegistry:
    """
    Registry mapping opaque integer handles to owned engine instances.

    Handles come from a monotonically increasing counter and are never
    reused, so a stale handle can never reach an engine created later.
    A single coarse lock guards the table and every call into an engine.
    """
    def __init__(self, max_handles: Optional[int] = None):
        """
        Initialize the registry.

        Args:
            max_handles: Optional cap on simultaneously live engines
        """
        if max_handles is not None and max_handles < 1:
            raise ValueError(f"max_handles must be positive, got {max_handles}")
        self.logger = logging.getLogger("application.registry.handles")
        self.max_handles = max_handles

        self._engines: Dict[int, Tuple[int, MersenneTwister]] = {}  # handle -> (width, engine)
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, width: int, seed: Optional[int] = None) -> int:
        """
        Create an engine and register it.

        Args:
            width: Word width, 32 or 64
            seed: Optional seed (default seed when omitted)

        Returns:
            Opaque handle for the new engine

        Raises:
            ValueError: If width is not 32 or 64
            AllocationFailureError: If the registry is full or state
                storage cannot be allocated
        """
        params = params_for_width(width)

        with self._lock:
            if self.max_handles is not None and len(self._engines) >= self.max_handles:
                self.logger.warning(f"Handle limit reached ({self.max_handles}), refusing new engine")
                raise AllocationFailureError(
                    f"Cannot create {params.name} engine: {self.max_handles} handles already live"
                )

            try:
                engine = create_engine(params, seed)
            except MemoryError as e:
                raise AllocationFailureError(f"Cannot allocate {params.name} state") from e

            handle = next(self._counter)
            self._engines[handle] = (width, engine)

        self.logger.debug(f"Created {params.name} engine as handle {handle} (seed={seed})")
        return handle

    def generate(self, handle: int, width: Optional[int] = None) -> int:
        """
        Produce the next word of a registered engine.

        Raises:
            InvalidHandleError: If the handle is not live for this width
        """
        with self._lock:
            engine = self._lookup(handle, width)
            return engine.generate()

    def release(self, handle: int, width: Optional[int] = None) -> None:
        """
        Release a registered engine and invalidate its handle.

        Raises:
            InvalidHandleError: If the handle is not live for this width,
                including a second release of the same handle
        """
        with self._lock:
            engine = self._lookup(handle, width)
            del self._engines[handle]
            engine.release()

        self.logger.debug(f"Released handle {handle}")

    def get_engine(self, handle: int, width: Optional[int] = None) -> MersenneTwister:
        """
        Borrow the engine behind a handle.

        The engine stays owned by the registry; calls made on it directly
        bypass the registry lock.
        """
        with self._lock:
            return self._lookup(handle, width)

    def release_all(self) -> int:
        """Release every live engine; returns how many were released."""
        with self._lock:
            engines = list(self._engines.values())
            self._engines.clear()

        for _, engine in engines:
            engine.release()
        if engines:
            self.logger.info(f"Released {len(engines)} engines")
        return len(engines)

    def live_handles(self) -> List[int]:
        with self._lock:
            return sorted(self._engines)

    def _lookup(self, handle: int, width: Optional[int]) -> MersenneTwister:
        # Caller holds the lock
        entry = self._engines.get(handle) if type(handle) is int else None
        if entry is None or (width is not None and entry[0] != width):
            self.logger.debug(f"Rejected handle {handle!r} (width={width})")
            raise InvalidHandleError(handle, width)
        return entry[1]

    def __len__(self) -> int:
        with self._lock:
            return len(self._engines)

    def __contains__(self, handle) -> bool:
        with self._lock:
            return type(handle) is int and handle in self._engines

    # Width-specific boundary operations

    def default_32(self) -> int:
        return self.create(32)

    def create_32(self, seed: int) -> int:
        return self.create(32, seed)

    def generate_32(self, handle: int) -> int:
        return self.generate(handle, 32)

    def release_32(self, handle: int) -> None:
        self.release(handle, 32)

    def default_64(self) -> int:
        return self.create(64)

    def create_64(self, seed: int) -> int:
        return self.create(64, seed)

    def generate_64(self, handle: int) -> int:
        return self.generate(handle, 64)

    def release_64(self, handle: int) -> None:
        self.release(handle, 64)


# Process-wide registry behind the module-level boundary functions
default_registry = HandleRegistry()


def default_32() -> int:
    return default_registry.default_32()


def create_32(seed: int) -> int:
    return default_registry.create_32(seed)


def generate_32(handle: int) -> int:
    return default_registry.generate_32(handle)


def release_32(handle: int) -> None:
    default_registry.release_32(handle)


def default_64() -> int:
    return default_registry.default_64()


def create_64(seed: int) -> int:
    return default_registry.create_64(seed)


def generate_64(handle: int) -> int:
    return default_registry.generate_64(handle)


def release_64(handle: int) -> None:
    default_registry.release_64(handle)
