"""
httpresult.tier1_runtime.outcome
─────────────────────────────────
What a handler produced, as a closed set of variants:

  NoAction          handler returned None and wrote the response itself
  StructuredResult  handler returned or raised a Result
  OpaqueError       handler returned or raised any other exception
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Union

from httpresult.tier0_core.errors import UnsupportedOutcomeError
from httpresult.tier0_core.result import Result


@dataclass(frozen=True)
class NoAction:
    pass


@dataclass(frozen=True)
class StructuredResult:
    result: Result


@dataclass(frozen=True)
class OpaqueError:
    error: Exception


Outcome = Union[NoAction, StructuredResult, OpaqueError]

NO_ACTION = NoAction()


def to_outcome(value: Any) -> Outcome:
    """
    Normalize a handler's return value (or the exception it raised).

    Raises UnsupportedOutcomeError for anything else, e.g. a bare dict.
    """
    if value is None:
        return NO_ACTION
    if isinstance(value, Result):
        return StructuredResult(value)
    if isinstance(value, Exception):
        return OpaqueError(value)
    raise UnsupportedOutcomeError(value)


def capture_outcome(handler: Callable[..., Any], *args: Any) -> Outcome:
    """Call ``handler(*args)``; a raised Exception counts as its return value."""
    try:
        value = handler(*args)
    except Exception as exc:
        value = exc
    return to_outcome(value)


__all__ = [
    "NoAction", "StructuredResult", "OpaqueError", "Outcome",
    "NO_ACTION", "to_outcome", "capture_outcome",
]
