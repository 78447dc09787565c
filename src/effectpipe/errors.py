"""Exceptions signalling misuse of the effect algebra.

These are faults in the calling code. Failures of the effects themselves are
never raised; they travel as :class:`~effectpipe.result.Err` values.
"""

from collections.abc import Hashable
from typing import Any


class EffectUsageError(Exception):
    """Base class for programming errors detected by effectpipe."""


class NotAnEffectError(EffectUsageError, TypeError):
    """Exception raised when a value that is not an Effect is run."""

    __match_args__ = ("value",)

    def __init__(self, value: Any):
        super().__init__(f"Expected an Effect, got: {value!r}")
        self.value = value


class NotAResultError(EffectUsageError, TypeError):
    """Exception raised when an effect or visitor returns something other than Ok or Err."""

    __match_args__ = ("value",)

    def __init__(self, value: Any):
        super().__init__(f"Expected an Ok or Err result, got: {value!r}")
        self.value = value


class DuplicateKeyError(EffectUsageError, ValueError):
    """Exception raised when a pipe step key is used more than once."""

    __match_args__ = ("key",)

    def __init__(self, key: Hashable):
        super().__init__(f"Key {key!r} already used")
        self.key = key


class NotAPipeError(EffectUsageError, TypeError):
    """Exception raised when a switch function does not return a Pipe."""

    __match_args__ = ("value",)

    def __init__(self, value: Any):
        super().__init__(f"switch expected a function returning a Pipe, got: {value!r}")
        self.value = value
