"""Keyed pipelines of effects.

A :class:`Pipe` runs effect-producing steps in order and stores the value of
each one under its own key. Every step sees the results of the steps before
it. The first failing step stops the pipe, and the failure is reported as a
:class:`PipeError` holding the failing key and everything computed so far.

Example:

>>> from effectpipe import Pipe, execute, fail, pure
>>>
>>> pipe = (
...     Pipe()
...     .then("x", lambda _: pure(1))
...     .then("y", lambda r: pure(r["x"] + 1))
... )
>>> execute(pipe)
Ok(value={'x': 1, 'y': 2})
>>> execute(pipe.then("z", lambda _: fail("oops")))
Err(error=PipeError(errors={'z': 'oops'}, results={'x': 1, 'y': 2}))
"""

import logging
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .effects import Bind, Composite, Effect, Fail, Pure, Visitor, interpret
from .errors import DuplicateKeyError, NotAnEffectError, NotAPipeError
from .result import Result

log = logging.getLogger(__name__)

type Results = Mapping[Hashable, Any]


@dataclass(frozen=True)
class PipeError:
    """Failure payload of a pipe.

    Attributes:
        errors: Single entry mapping the key of the failing step to its error.
        results: Values of all steps that succeeded before the failure.
    """

    errors: dict[Hashable, Any]
    results: dict[Hashable, Any]


@dataclass(frozen=True)
class _Then:
    key: Hashable
    step: Callable[[Results], Effect[Any]]

    def attach(self, effect: Effect[dict[Hashable, Any]]) -> Effect[dict[Hashable, Any]]:
        return Bind(effect, self._run)

    def _run(self, results: dict[Hashable, Any]) -> Effect[dict[Hashable, Any]]:
        key = self.key
        if key in results:
            raise DuplicateKeyError(key)

        log.debug("Running pipe step %r", key)
        effect = self.step(MappingProxyType(results))
        if not isinstance(effect, Effect):
            raise NotAnEffectError(effect)

        def store(value: Any) -> dict[Hashable, Any]:
            return {**results, key: value}

        def capture(error: Any) -> Effect[Any]:
            return Fail(PipeError(errors={key: error}, results=dict(results)))

        return effect.map(store).or_else(capture)


@dataclass(frozen=True)
class _Switch:
    choose: Callable[[Results], "Pipe"]

    def attach(self, effect: Effect[dict[Hashable, Any]]) -> Effect[dict[Hashable, Any]]:
        return Bind(effect, self._run)

    def _run(self, results: dict[Hashable, Any]) -> Effect[dict[Hashable, Any]]:
        pipe = self.choose(MappingProxyType(results))
        if not isinstance(pipe, Pipe):
            raise NotAPipeError(pipe)
        # Fail before any spliced step runs.
        for key in pipe.keys:
            if key in results:
                raise DuplicateKeyError(key)
        log.debug("Splicing %r into running pipe", pipe)
        return pipe._lower(results)


class Pipe(Composite[dict[Hashable, Any]]):
    """An ordered sequence of keyed effect-producing steps.

    Pipes are immutable: :meth:`then` and :meth:`switch` return a new pipe and
    leave the original untouched, so a pipe can be extended in several
    directions or executed any number of times. Executing a pipe yields
    ``Ok(results)`` with one entry per step, or ``Err(PipeError(...))`` for the
    first step that failed.

    Step keys may be any hashable value except ``None`` and must be unique
    across the whole pipeline, including pipes spliced in with :meth:`switch`.
    """

    def __init__(self) -> None:
        self._steps: tuple[_Then | _Switch, ...] = ()
        self._keys: tuple[Hashable, ...] = ()

    @classmethod
    def new(cls, effect: Effect[Any], key: Hashable) -> "Pipe":
        """Return a pipe storing the result of ``effect`` under ``key``."""
        return cls().then(key, lambda _: effect)

    @classmethod
    def value(cls, key: Hashable, value: Any) -> "Pipe":
        """Return a pipe storing the pure ``value`` under ``key``."""
        return cls.new(Pure(value), key)

    @property
    def keys(self) -> tuple[Hashable, ...]:
        """Keys of the steps added with :meth:`then`, in order."""
        return self._keys

    def then(self, key: Hashable, step: Callable[[Results], Effect[Any]]) -> "Pipe":
        """Append a step storing its result under ``key``.

        Args:
            key: Unique, hashable, non-``None`` identifier of the step.
            step: Called with a read-only mapping of the results of all prior
                  steps. Must return the effect to run.

        Returns:
            A new pipe ending with the step.

        Raises:
            DuplicateKeyError: If ``key`` is already used by this pipe.
            TypeError: If ``key`` is ``None`` or unhashable, or ``step`` is not callable.
        """
        if key is None:
            raise TypeError("Pipe step key must not be None")
        hash(key)
        if key in self._keys:
            raise DuplicateKeyError(key)
        if not callable(step):
            raise TypeError(f"Expected a callable step, got: {step!r}")
        return self._extend(_Then(key, step), (*self._keys, key))

    def switch(self, choose: Callable[[Results], "Pipe"]) -> "Pipe":
        """Append a step that picks another pipe to splice in.

        ``choose`` is called with the results so far and must return a
        :class:`Pipe`. Its steps then run as part of this pipe, reading and
        extending the same results.

        Raises:
            TypeError: If ``choose`` is not callable.
        """
        if not callable(choose):
            raise TypeError(f"Expected a callable, got: {choose!r}")
        return self._extend(_Switch(choose), self._keys)

    def _extend(self, step: _Then | _Switch, keys: tuple[Hashable, ...]) -> "Pipe":
        pipe = Pipe()
        pipe._steps = (*self._steps, step)
        pipe._keys = keys
        return pipe

    def _lower(self, results: dict[Hashable, Any]) -> Effect[dict[Hashable, Any]]:
        effect: Effect[dict[Hashable, Any]] = Pure(results)
        for step in self._steps:
            effect = step.attach(effect)
        return effect

    def interpret(self, visitor: Visitor) -> Result[dict[Hashable, Any], Any]:
        return interpret(self._lower({}), visitor)

    def __repr__(self) -> str:
        return f"Pipe<{', '.join(str(key) for key in self._keys)}>"
