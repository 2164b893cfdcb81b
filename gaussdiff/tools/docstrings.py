"""
Text blocks shared between docstrings of different functions and classes.

.. autosummary::
   :nosignatures:

   get_text_block
   fill_in_docstring
"""

import re
import textwrap
from typing import TypeVar

DOCSTRING_REPLACEMENTS = {
    # description of function arguments
    "ARG_TRACKER_INTERRUPT": """
        Determines when the tracker interrupts the simulation. A single number
        determines an interval (measured in the simulation time unit) of regular
        interruption. A list of numbers specifies fixed times at which the
        simulation is interrupted. Instances of the classes defined in
        :mod:`~gaussdiff.trackers.interrupts` can be given for more control.
        """,
    "ARG_VELOCITY": """
        The steady velocity field advecting the tracer. `None` disables advection.
        Otherwise, a sequence with one entry per axis is expected, where each entry
        is a number, an array with the shape of the grid, a callable evaluated with
        the grid coordinates, or a string that is parsed as a sympy expression of
        the coordinates `x` and `y`.
        """,
    "ARG_MOMENT_ORDER": """
        The exponent `p` of the rank weights. The first moment (`p=1`) measures the
        average area of a blob, while the second moment (`p=2`) measures the
        squared length of a one-dimensional profile or the squared area of a band.
        """,
    # notes in the docstring
    "WARNING_EXEC": r"""
        This implementation uses :func:`exec` and should therefore not be used
        in a context where malicious input could occur.
        """,
}

_TOKEN_RE = re.compile(r"^([ \t]*)\{([A-Z_]+)\}[ \t]*$", flags=re.MULTILINE)


def get_text_block(identifier: str) -> str:
    """return the text block `identifier` without its indentation

    Raises:
        KeyError: if no block with this name exists
    """
    return textwrap.dedent(DOCSTRING_REPLACEMENTS[identifier]).strip()


TFunc = TypeVar("TFunc")


def fill_in_docstring(f: TFunc) -> TFunc:
    """decorator replacing lines like `{ARG_VELOCITY}` in the docstring

    The replacement is wrapped to the line length and takes over the indentation of
    the token. Unknown tokens are left untouched.
    """
    if not f.__doc__:  # e.g., docstrings removed by `python -OO`
        return f

    def expand(match: re.Match) -> str:
        indent, name = match.groups()
        if name not in DOCSTRING_REPLACEMENTS:
            return match.group(0)
        return textwrap.fill(
            get_text_block(name),
            width=88,
            initial_indent=indent,
            subsequent_indent=indent,
        )

    f.__doc__ = _TOKEN_RE.sub(expand, f.__doc__)
    return f
