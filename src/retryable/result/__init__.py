r"""Success-or-failure values used to capture attempts and report
outcomes."""

from __future__ import annotations

__all__ = ["BaseOutcome", "Result"]

from retryable.result.base import BaseOutcome
from retryable.result.result import Result
