"""Income Stream - three-tier dividend income portfolio tracker."""

from income_stream.version import VERSION

__version__ = VERSION
