"""A small effect algebra for Python.

Side effects are described as inert values and performed later, in one place.
Business logic builds effects without running anything, :func:`execute`
performs them, and :func:`interpret` walks them with a substitute visitor so
the logic can be tested without touching the outside world.

Example:

>>> import effectpipe as fx
>>>
>>> # Define an effect type
>>> class Greet(fx.Effect[str]):
...     def __init__(self, name: str):
...         self.name = name
...
...     def execute(self):
...         print(f"Hello, {self.name}!")
...         return fx.Ok(self.name)
>>>
>>> # Compose effects without running them
>>> welcome = (
...     fx.Pipe()
...     .then("greeted", lambda _: Greet("Alice"))
...     .then("length", lambda r: fx.pure(len(r["greeted"])))
... )
>>>
>>> # Run them for real...
>>> fx.execute(welcome)
Hello, Alice!
Ok(value={'greeted': 'Alice', 'length': 5})
>>>
>>> # ...or with a substitute for every leaf effect
>>> fx.interpret(welcome, lambda e: fx.Ok(e.name.upper()))
Ok(value={'greeted': 'ALICE', 'length': 5})
"""

import logging

from .__version__ import __version__
from .effects import (
    Bind,
    BindErr,
    Composite,
    Effect,
    Fail,
    Map,
    Pure,
    Visitor,
    bind,
    execute,
    fail,
    interpret,
    lift2,
    map,
    or_else,
    pure,
)
from .errors import (
    DuplicateKeyError,
    EffectUsageError,
    NotAnEffectError,
    NotAPipeError,
    NotAResultError,
)
from .pipe import Pipe, PipeError
from .result import Err, Ok, Result, UnwrapError

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Bind",
    "BindErr",
    "Composite",
    "DuplicateKeyError",
    "Effect",
    "EffectUsageError",
    "Err",
    "Fail",
    "Map",
    "NotAPipeError",
    "NotAResultError",
    "NotAnEffectError",
    "Ok",
    "Pipe",
    "PipeError",
    "Pure",
    "Result",
    "UnwrapError",
    "Visitor",
    "__version__",
    "bind",
    "execute",
    "fail",
    "interpret",
    "lift2",
    "map",
    "or_else",
    "pure",
]
