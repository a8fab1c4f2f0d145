"""docsfetcher: crawl library documentation sites into one Markdown document."""

from __future__ import annotations

import warnings
from importlib.metadata import PackageNotFoundError, version

_FALLBACK_VERSION = "0.0.0+unknown"


def _resolve_version() -> str:
    try:
        return version("docsfetcher")
    except PackageNotFoundError:
        # Running from a source checkout that was never installed
        warnings.warn(
            f"Package metadata for 'docsfetcher' not found; using fallback version "
            f"'{_FALLBACK_VERSION}'.",
            RuntimeWarning,
            stacklevel=3,
        )
        return _FALLBACK_VERSION


__version__ = _resolve_version()
