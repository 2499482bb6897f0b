"""Default polling cadence for statewait.

These are only the defaults of WaitSpec fields; every value can be
overridden per wait call or through statewait.toml.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Backoff
# =============================================================================

DEFAULT_BASE_INTERVAL: Final = 0.1
DEFAULT_MAX_INTERVAL: Final = 10.0
DEFAULT_BACKOFF_FACTOR: Final = 2.0


# =============================================================================
# Classification
# =============================================================================

DEFAULT_NOT_FOUND_CHECKS: Final = 20
DEFAULT_TARGET_OCCURRENCES: Final = 1


# =============================================================================
# Configuration files
# =============================================================================

CONFIG_DIR_NAME: Final = ".statewait"
GLOBAL_CONFIG_NAME: Final = "defaults.toml"
PROJECT_CONFIG_NAME: Final = "statewait.toml"
