"""Utility decorators for the Income Stream codebase."""

import functools
from typing import Any, TypeVar

T = TypeVar("T")


def singleton(cls: type[T]) -> type[T]:
    """
    Singleton decorator for classes.

    One instance per process. Not thread-safe; the service runs on a single
    asyncio event loop.

    Usage:
        @singleton
        class Settings:
            def __init__(self):
                self._db = Database()

        assert Settings() is Settings()
    """
    instances: dict[type[Any], Any] = {}

    @functools.wraps(cls)
    def get_instance(*args: Any, **kwargs: Any) -> T:
        if cls not in instances:
            instances[cls] = cls(*args, **kwargs)
        return instances[cls]

    # Exposed so tests can reset state between cases
    get_instance._instances = instances  # type: ignore
    get_instance._clear = lambda: instances.clear()  # type: ignore

    return get_instance  # type: ignore
