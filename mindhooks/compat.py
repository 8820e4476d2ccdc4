"""
Compatibility utilities for mindhooks.

Hook processes are short-lived and must start fast, so anything with a
noticeable load cost (tokenizer tables, store handles) is created on
first use through LazyLoader instead of at import time.
"""

from collections.abc import Callable
from typing import TypeVar

T = TypeVar('T')


class LazyLoader:
    """
    Lazy loader for module-level objects.

    Defers instantiation until first access. A factory that raises leaves
    the loader permanently unavailable for the life of the process rather
    than retrying on every call.

    Example:
        _encoding = LazyLoader(lambda: tiktoken.get_encoding("cl100k_base"))

        # Later, when actually needed:
        enc = _encoding.get()  # Instantiates on first call, None on failure
    """

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._instance: T | None = None
        self._initialized = False
        self.error: Exception | None = None

    def get(self) -> T | None:
        """Get the lazily-loaded instance."""
        if not self._initialized:
            try:
                self._instance = self._factory()
            except Exception as e:
                self._instance = None
                self.error = e
            self._initialized = True
        return self._instance

    def is_available(self) -> bool:
        """Check if the instance was successfully created."""
        if not self._initialized:
            self.get()
        return self._instance is not None

    def reset(self) -> None:
        """Reset the loader (useful for testing)."""
        self._instance = None
        self._initialized = False
        self.error = None
