"""Version information for the i18n key extractor."""

import logging
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "i18n-extract"
FALLBACK_VERSION = "0.0.0"


@lru_cache(maxsize=1)
def get_version() -> str:
    """
    Get the installed package version.

    Returns:
        Version string, or a fallback when the package is not installed
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        logger.debug(f"{DISTRIBUTION_NAME} is not installed, using fallback version")
        return FALLBACK_VERSION
