from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .errors import NotAnEffectError, NotAResultError
from .result import Err, Ok, Result

R = TypeVar("R")  # Value type produced by an effect
T = TypeVar("T")  # Value type consumed by a combinator
U = TypeVar("U")  # Value type produced by a combinator
V = TypeVar("V")  # Value type of a second effect in lift2

type Visitor = Callable[["Effect[Any]"], Result[Any, Any]]


class Effect[R](ABC):
    """Base class for all effects.

    An effect is an inert description of work. Subclasses implement
    :meth:`execute` to perform it. Effects that embed other effects should
    derive from :class:`Composite` instead.
    """

    @abstractmethod
    def execute(self) -> Result[R, Any]:
        """Perform the effect, returning ``Ok(value)`` or ``Err(error)``."""

    def interpret(self, visitor: Visitor) -> Result[R, Any]:
        """Hand this effect to ``visitor`` instead of performing it.

        Leaf effects keep this default. Composite effects must override it so
        that their embedded effects are visited one by one and never executed.
        """
        return visitor(self)

    def map[U](self, transform: Callable[[R], U]) -> "Map[R, U]":
        return Map(self, transform)

    def bind[U](self, continuation: Callable[[R], "Effect[U]"]) -> "Bind[R, U]":
        return Bind(self, continuation)

    def or_else[U](self, recovery: Callable[[Any], "Effect[U]"]) -> "BindErr[R | U]":
        return BindErr(self, recovery)


class Composite[R](Effect[R]):
    """Base class for effects built out of other effects.

    Subclasses implement :meth:`interpret` by recursing into their embedded
    effects with :func:`interpret`. Execution is derived from it by using
    :func:`execute` as the visitor, so an implementation of ``interpret`` must
    neither perform side effects itself nor call :func:`execute`.
    """

    def execute(self) -> Result[R, Any]:
        return self.interpret(execute)

    @abstractmethod
    def interpret(self, visitor: Visitor) -> Result[R, Any]: ...


@dataclass(frozen=True)
class Pure[R](Effect[R]):
    """Effect that always succeeds with ``value``."""

    value: R

    def execute(self) -> Result[R, Any]:
        return Ok(self.value)

    def interpret(self, visitor: Visitor) -> Result[R, Any]:
        # Pure values never reach the visitor.
        return Ok(self.value)


@dataclass(frozen=True)
class Fail(Effect[Any]):
    """Effect that always fails with ``error``."""

    error: Any

    def execute(self) -> Result[Any, Any]:
        return Err(self.error)

    def interpret(self, visitor: Visitor) -> Result[Any, Any]:
        return Err(self.error)


@dataclass(frozen=True)
class Map[T, U](Composite[U]):
    """Apply ``transform`` to the value of ``inner``; errors pass through."""

    inner: Effect[T]
    transform: Callable[[T], U]

    def interpret(self, visitor: Visitor) -> Result[U, Any]:
        match interpret(self.inner, visitor):
            case Ok(value):
                return Ok(self.transform(value))
            case failure:
                return failure


@dataclass(frozen=True)
class Bind[T, U](Composite[U]):
    """Feed the value of ``inner`` to ``continuation`` and run the effect it returns."""

    inner: Effect[T]
    continuation: Callable[[T], Effect[U]]

    def interpret(self, visitor: Visitor) -> Result[U, Any]:
        # Left-nested binds run in a loop: stack depth does not grow with
        # chain length, and every pipe lowers to such a chain.
        continuations = [self.continuation]
        node = self.inner
        while type(node) is Bind:
            continuations.append(node.continuation)
            node = node.inner

        result = interpret(node, visitor)
        for continuation in reversed(continuations):
            match result:
                case Ok(value):
                    result = interpret(continuation(value), visitor)
                case _:
                    return result
        return result


@dataclass(frozen=True)
class BindErr[R](Composite[R]):
    """Feed the error of ``inner`` to ``recovery`` and run the effect it returns."""

    inner: Effect[Any]
    recovery: Callable[[Any], Effect[Any]]

    def interpret(self, visitor: Visitor) -> Result[R, Any]:
        match interpret(self.inner, visitor):
            case Err(error):
                return interpret(self.recovery(error), visitor)
            case success:
                return success


def _check_result(value: Any) -> Result[Any, Any]:
    match value:
        case Ok() | Err():
            return value
        case _:
            raise NotAResultError(value)


def execute(effect: Effect[R]) -> Result[R, Any]:
    """Execute an effect, performing its side effects.

    Args:
        effect: The effect to perform.

    Returns:
        ``Ok(value)`` if the effect succeeded, ``Err(error)`` otherwise.

    Raises:
        NotAnEffectError: If ``effect`` is not an :class:`Effect`.
        NotAResultError: If an effect returned something other than Ok or Err.
    """
    if not isinstance(effect, Effect):
        raise NotAnEffectError(effect)
    return _check_result(effect.execute())


def interpret(effect: Effect[R], visitor: Visitor) -> Result[R, Any]:
    """Walk an effect, handing every leaf effect to ``visitor`` instead of executing it.

    Useful for testing business logic: the visitor decides what each leaf
    effect "returns" and can record what it was given, and nothing real
    happens.

    Args:
        effect: The effect to interpret.
        visitor: Called once for every leaf effect reached. Must return
                 ``Ok(value)`` or ``Err(error)``.

    Returns:
        The result of the whole effect under the visitor.

    Raises:
        NotAnEffectError: If ``effect`` (or an effect returned by a continuation)
                          is not an :class:`Effect`.
        NotAResultError: If ``visitor`` returned something other than Ok or Err.
        TypeError: If ``visitor`` is not callable.
    """
    if not isinstance(effect, Effect):
        raise NotAnEffectError(effect)
    if not callable(visitor):
        raise TypeError(f"Expected a callable visitor, got: {visitor!r}")
    return _check_result(effect.interpret(visitor))


def pure(value: R) -> Pure[R]:
    """Wrap a value into an effect that always succeeds with it."""
    return Pure(value)


def fail(error: Any) -> Fail:
    """Wrap an error into an effect that always fails with it."""
    return Fail(error)


def map(effect: Effect[T], transform: Callable[[T], U]) -> Map[T, U]:
    """Map the value of ``effect`` with a pure function.

    Example:
        >>> execute(map(pure(1), lambda x: x + 1))
        Ok(value=2)
    """
    return Map(effect, transform)


def bind(effect: Effect[T], continuation: Callable[[T], Effect[U]]) -> Bind[T, U]:
    """Pass the value of ``effect`` to ``continuation``, which returns the next effect.

    Example:
        >>> execute(bind(pure(1), lambda x: pure(x + 1)))
        Ok(value=2)
    """
    return Bind(effect, continuation)


def or_else(effect: Effect[T], recovery: Callable[[Any], Effect[U]]) -> BindErr[T | U]:
    """Recover from the error of ``effect`` with ``recovery``, which returns the next effect.

    Example:
        >>> execute(or_else(fail("oops"), lambda e: pure("phew")))
        Ok(value='phew')
        >>> execute(or_else(fail("oops"), lambda e: fail(e.upper())))
        Err(error='OOPS')
    """
    return BindErr(effect, recovery)


def lift2(ea: Effect[T], eb: Effect[V], combine: Callable[[T, V], U]) -> Bind[T, U]:
    """Combine the values of two effects with ``combine``.

    ``ea`` runs first. If it fails, ``eb`` is never run and the first error is
    returned.

    Example:
        >>> execute(lift2(pure(1), pure(2), lambda a, b: a + b))
        Ok(value=3)
        >>> execute(lift2(fail("oh no"), fail("oops"), lambda a, b: a + b))
        Err(error='oh no')
    """
    return bind(ea, lambda a: map(eb, lambda b: combine(a, b)))
