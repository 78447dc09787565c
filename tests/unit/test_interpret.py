"""Unit tests for structural interpretation of effects."""

from dataclasses import dataclass

import pytest

from effectpipe.effects import Bind, BindErr, Composite, Effect, Fail, Pure, execute, interpret
from effectpipe.errors import NotAnEffectError, NotAResultError
from effectpipe.result import Err, Ok


class Counter(Effect[int]):
    """A leaf effect whose real execution increments a shared counter."""

    def __init__(self, name: str, counter: list[int]):
        self.name = name
        self.counter = counter

    def execute(self):
        self.counter[0] += 1
        return Ok(self.counter[0])


@dataclass(frozen=True)
class Both[T](Composite[tuple[T, T]]):
    """A user-defined composite running two effects and pairing their values."""

    first: Effect[T]
    second: Effect[T]

    def interpret(self, visitor):
        match interpret(self.first, visitor):
            case Ok(a):
                match interpret(self.second, visitor):
                    case Ok(b):
                        return Ok((a, b))
                    case failure:
                        return failure
            case failure:
                return failure


class Recorder:
    """A visitor that records the leaves it receives and answers with their names."""

    def __init__(self):
        self.visited: list[Effect] = []

    def __call__(self, effect):
        self.visited.append(effect)
        return Ok(effect.name)


def test_interpretation_never_executes_leaves():
    """Test that interpreting a composite hands each leaf to the visitor instead of running it."""
    counter = [0]
    a = Counter("a", counter)
    effect = Bind(a, lambda x: Counter(f"{x}-b", counter).map(str.upper))
    visitor = Recorder()

    assert interpret(effect, visitor) == Ok("A-B")
    assert counter == [0]
    assert [leaf.name for leaf in visitor.visited] == ["a", "a-b"]
    assert visitor.visited[0] is a


def test_execution_of_same_tree_runs_leaves():
    """Test that executing the same kind of tree performs the leaves for real."""
    counter = [0]
    effect = Bind(Counter("a", counter), lambda x: Counter("b", counter).map(lambda y: x + y))
    assert execute(effect) == Ok(3)
    assert counter == [2]


def test_pure_and_fail_bypass_visitor():
    """Test that pure values and failures are interpreted without consulting the visitor."""

    def visitor(effect):
        raise AssertionError(f"visitor called with {effect!r}")

    assert interpret(Pure(1), visitor) == Ok(1)
    assert interpret(Fail("oops"), visitor) == Err("oops")


def test_visitor_failure_short_circuits():
    """Test that an Err from the visitor stops the interpretation like a real failure."""
    counter = [0]
    continuation_calls: list[str] = []

    def continuation(value):
        continuation_calls.append(value)
        return Counter("never", counter)

    effect = Bind(Counter("a", counter), continuation)
    assert interpret(effect, lambda e: Err(f"denied {e.name}")) == Err("denied a")
    assert continuation_calls == []


def test_bind_err_recovers_under_interpretation():
    """Test that BindErr recursion reaches leaves inside the recovery effect."""
    counter = [0]
    effect = BindErr(Counter("a", counter), lambda e: Counter(f"fallback-{e}", counter))

    def visitor(effect):
        if effect.name == "a":
            return Err("down")
        return Ok(effect.name)

    assert interpret(effect, visitor) == Ok("fallback-down")
    assert counter == [0]


def test_custom_composite_interprets_and_executes():
    """Test that a user composite gets execution for free from its interpretation."""
    counter = [0]
    both = Both(Counter("x", counter), Counter("y", counter))

    visitor = Recorder()
    assert interpret(both, visitor) == Ok(("x", "y"))
    assert counter == [0]
    assert len(visitor.visited) == 2

    assert execute(both) == Ok((1, 2))
    assert counter == [2]


def test_composite_must_define_interpret():
    """Test that composites without an interpret implementation cannot be instantiated."""

    class Opaque(Composite[int]):
        pass

    with pytest.raises(TypeError):
        Opaque()  # type: ignore[abstract]


def test_interpret_non_effect():
    """Test that interpreting a plain value is a usage fault."""
    with pytest.raises(NotAnEffectError):
        interpret("not an effect", lambda e: Ok(e))  # type: ignore[arg-type]


def test_interpret_requires_callable_visitor():
    """Test that the visitor must be callable."""
    with pytest.raises(TypeError):
        interpret(Pure(1), None)  # type: ignore[arg-type]


def test_visitor_returning_non_result():
    """Test that a visitor answering with a bare value is a usage fault."""
    with pytest.raises(NotAResultError):
        interpret(Counter("a", [0]).map(lambda x: x), lambda e: "bare")


def test_interpret_long_bind_chain():
    """Test that interpreting thousands of chained binds visits every leaf once."""
    counter = [0]
    effect = Counter("0", counter)
    for i in range(1, 3000):
        effect = effect.bind(lambda _, i=i: Counter(str(i), counter))
    visitor = Recorder()

    assert interpret(effect, visitor) == Ok("2999")
    assert len(visitor.visited) == 3000
    assert counter == [0]
