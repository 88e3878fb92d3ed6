r"""Default configuration values and limits for retry execution.

The retry engine expresses every delay as an integer number of
milliseconds. These constants are the defaults used by
``RetryPolicy`` and the saturation limit used by the built-in backoff
strategies.
"""

from __future__ import annotations

__all__ = ["DEFAULT_BASE_DELAY_MS", "DEFAULT_MAX_RETRIES", "MAX_DELAY_MS"]

# Default number of retries after the initial attempt
# Total attempts = max_retries + 1, so the default runs the task once
DEFAULT_MAX_RETRIES = 0

# Default base delay in milliseconds between two attempts
DEFAULT_BASE_DELAY_MS = 0

# Largest delay a backoff strategy may return, in milliseconds
# Matches the range of a signed 64-bit integer; strategies saturate to this
# value instead of growing without bound
MAX_DELAY_MS = 2**63 - 1
