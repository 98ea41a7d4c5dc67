from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Result:
    """
    Outcome of a service call.

    Services return a Result for expected failures (validation, database
    errors) instead of raising, so views can surface ``error`` directly.
    """

    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value=None):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error, value=None):
        return cls(ok=False, value=value, error=error)

    def __bool__(self):
        return self.ok
