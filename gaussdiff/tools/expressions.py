"""Handling mathematical expressions with sympy.

Expressions for initial conditions and velocity fields can be given as
human-readable strings, which are parsed by :mod:`sympy` and turned into functions
acting on :mod:`numpy` arrays.

.. autosummary::
   :nosignatures:

   parse_expr_guarded
   ScalarExpression
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Sequence
from typing import Callable

import numpy as np
import sympy
from sympy.core import basic

from .docstrings import fill_in_docstring
from .typing import NumberOrArray

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for expressions."""


def parse_expr_guarded(expression: str, symbols: Sequence[str] = ()) -> basic.Basic:
    """Parse `expression` with sympy, keeping the names in `symbols` as symbols.

    Without the guard, names like `beta` or `gamma` would be read as the special
    functions of sympy.
    """
    from sympy.parsing import sympy_parser

    local_dict = {name: sympy.Symbol(name) for name in symbols}
    return sympy_parser.parse_expr(expression, local_dict=local_dict)


class ScalarExpression:
    """Scalar function of the grid coordinates given by a formula"""

    @fill_in_docstring
    def __init__(
        self,
        expression: str | float | ScalarExpression | None = 0,
        signature: Sequence[str] = ("x", "y"),
    ):
        """
        Warning:
            {WARNING_EXEC}

        Args:
            expression (str or float):
                A number or a formula readable by sympy. Empty values mean zero.
            signature (list of str):
                Names of the variables in the order in which values are passed when
                the expression is called
        """
        self.vars = tuple(signature)

        if isinstance(expression, ScalarExpression):
            self._sympy_expr = expression._sympy_expr
        elif callable(expression):
            raise TypeError("Expressions are given as strings, not as functions")
        elif isinstance(expression, numbers.Number):
            self._sympy_expr = sympy.Float(expression)
        elif not expression:
            self._sympy_expr = sympy.Float(0)
        else:
            self._sympy_expr = parse_expr_guarded(str(expression), symbols=self.vars)

        extra = {str(s) for s in self._sympy_expr.free_symbols} - set(self.vars)
        if extra:
            raise ValueError(
                f"`{self.expression}` uses {sorted(extra)}, but only {list(self.vars)} "
                "are defined"
            )
        _logger.debug("Parsed expression `%s`", self.expression)
        self._func: Callable[..., NumberOrArray] | None = None

    def __repr__(self):
        return f'{type(self).__name__}("{self.expression}", signature={self.vars})'

    @property
    def expression(self) -> str:
        """str: the formula as printed by sympy"""
        return str(self._sympy_expr)

    @property
    def constant(self) -> bool:
        """bool: whether no variable appears in the formula"""
        return not self._sympy_expr.free_symbols

    @property
    def value(self) -> float:
        """float: the number a constant expression evaluates to"""
        if not self.constant:
            raise TypeError(f"`{self.expression}` is not constant")
        return float(self._sympy_expr.evalf())

    def get_function(self) -> Callable[..., NumberOrArray]:
        """Return the expression compiled to a numpy function (cached)."""
        if self._func is None:
            args = sympy.symbols(self.vars) if self.vars else ()
            self._func = sympy.lambdify(args, self._sympy_expr, modules="numpy")
        return self._func

    def __call__(self, *args) -> NumberOrArray:
        """Evaluate the expression; the result has the broadcast shape of `args`."""
        result = self.get_function()(*args)
        if not args:
            return result
        shape = np.broadcast_shapes(*(np.shape(arg) for arg in args))
        return np.broadcast_to(result, shape)
