"""Income Stream API package.

Contains FastAPI routers, request models and error handlers for the web API.
"""

from income_stream.api.dependencies import CommonDependencies

__all__ = ["CommonDependencies"]
