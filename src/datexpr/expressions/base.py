"""Expression — an operation paired with its parameter shapes.

Calling convention shared by every ``$date*`` operation:

- arguments are positional, in declaration order;
- an omitted middle argument is passed as ``None`` (the operation's
  default applies);
- when fewer arguments than parameters are given, the caller's current
  value (``$$VALUE``) fills the last parameter.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from datexpr.domain.errors import ShapeValidationError
from datexpr.domain.shapes import Shapes, matches, shape_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Expression:
    """A callable plus the ordered shapes each of its parameters accepts."""

    name: str
    function: Callable[..., Any]
    param_shapes: tuple[Shapes, ...]

    @property
    def arity(self) -> int:
        return len(self.param_shapes)

    def bind(self, args: Sequence[Any], value: Any) -> list[Any]:
        """Complete *args* to full arity using the current *value*."""
        if len(args) > self.arity:
            msg = f"{self.name} takes at most {self.arity} arguments, got {len(args)}"
            raise ShapeValidationError(msg, expected=(), actual=list(args))
        bound = list(args)
        if self.arity and len(bound) < self.arity:
            bound.extend([None] * (self.arity - 1 - len(bound)))
            bound.append(value)
        return bound

    def validate(self, bound: Sequence[Any]) -> None:
        for position, (shapes, argument) in enumerate(zip(self.param_shapes, bound, strict=True)):
            if not matches(shapes, argument):
                msg = (
                    f"{self.name}: argument {position} expected {'|'.join(shapes)}, "
                    f"got {shape_of(argument)} ({argument!r})"
                )
                raise ShapeValidationError(msg, expected=shapes, actual=argument)

    def call(self, args: Sequence[Any], value: Any = None) -> Any:
        """Bind, validate and invoke."""
        bound = self.bind(args, value)
        self.validate(bound)
        logger.debug("Invoking %s with %d arguments", self.name, len(bound))
        return self.function(*bound)
