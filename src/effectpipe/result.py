from dataclasses import dataclass
from typing import Any, Literal, Never


class UnwrapError(Exception):
    """Exception raised when the wrong variant of a result is unwrapped."""

    __match_args__ = ("result",)

    def __init__(self, result: "Ok[Any] | Err[Any]", message: str):
        super().__init__(f"{message}: {result!r}")
        self.result = result


@dataclass(frozen=True)
class Ok[T]:
    """Successful outcome of running an effect."""

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Never:
        raise UnwrapError(self, "Called unwrap_err() on an Ok result")


@dataclass(frozen=True)
class Err[E]:
    """Failed outcome of running an effect.

    The payload is ordinary data chosen by whoever produced the failure. It is
    never raised.
    """

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Never:
        raise UnwrapError(self, "Called unwrap() on an Err result")

    def unwrap_err(self) -> E:
        return self.error


type Result[T, E] = Ok[T] | Err[E]
