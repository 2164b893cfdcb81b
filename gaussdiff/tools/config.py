"""Configuration of the package and report of the compute environment.

The global configuration is available as :data:`gaussdiff.config`. Values can be
changed permanently by item assignment or temporarily using the configuration as a
context manager:

.. code-block:: python

    with gaussdiff.config({"spectral.dealias_fraction": 1}):
        eq.solve(state, t_range=1, dt=0.01)

.. autosummary::
   :nosignatures:

   Parameter
   Config
   get_package_versions
   environment
"""

from __future__ import annotations

import collections
import contextlib
import importlib.metadata
import logging
import sys
from typing import Any

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for the configuration."""


class Parameter:
    """A configuration value with a default, a type, and a description."""

    def __init__(
        self,
        name: str,
        default_value=None,
        cls=object,
        description: str = "",
    ):
        """
        Args:
            name (str):
                The key of the parameter in the configuration
            default_value:
                The value used unless the configuration sets another one
            cls:
                The type that values are converted to. `object` skips conversion.
            description (str):
                Explanation of what the parameter changes
        """
        self.name = name
        self.default_value = default_value
        self.cls = cls
        self.description = description

        if cls is not object and cls(default_value) != default_value:
            _logger.warning(
                "Default value of `%s` is not of type `%s`", name, cls.__name__
            )

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(name={self.name!r}, "
            f"default_value={self.default_value!r}, cls={self.cls.__name__}, "
            f"description={self.description!r})"
        )

    def convert(self, value=None):
        """Return `value` (or the default value) converted to the parameter type

        Args:
            value: The value to convert. `None` selects the default value.

        Returns:
            The converted value
        """
        value = self.default_value if value is None else value
        if self.cls is object:
            return value
        try:
            return self.cls(value)
        except ValueError as err:
            raise ValueError(
                f"Parameter `{self.name}` expects {self.cls.__name__}, got {value!r}"
            ) from err


DEFAULT_CONFIG: list[Parameter] = [
    Parameter(
        "numba.debug",
        False,
        bool,
        "Compile numba kernels in debug mode, which emits information helping to "
        "locate errors in compiled code.",
    ),
    Parameter(
        "numba.fastmath",
        True,
        bool,
        "Compile numba kernels with the fastmath flag. Sums of concentrations may be "
        "reordered, while infinities and NaN values are still detected.",
    ),
    Parameter(
        "spectral.dealias_fraction",
        2 / 3,
        float,
        "Fraction of the largest wave number that is kept when evaluating the "
        "advection term pseudo-spectrally. The standard value of 2/3 removes the "
        "aliasing errors of quadratic products.",
    ),
    Parameter(
        "movie.framerate",
        12,
        int,
        "Number of frames per second used when writing movies of simulations.",
    ),
    Parameter(
        "movie.dpi",
        150,
        int,
        "Resolution (dots per inch) of images and movie frames written to disk.",
    ),
]


class Config(collections.UserDict):
    """Dictionary of configuration values guarded by a mode

    The mode determines which changes are allowed:

    * `insert`: new keys can be added and existing keys can be removed
    * `update`: only values of existing keys can be changed
    * `locked`: nothing can be changed
    """

    def __init__(self, items: dict[str, Any] | None = None, mode: str = "update"):
        """
        Args:
            items (dict, optional):
                Values added to the defaults, even if they introduce new keys
            mode (str):
                The mode of the configuration after initialization
        """
        self.mode = "insert"
        super().__init__({parameter.name: parameter for parameter in DEFAULT_CONFIG})
        self.update(items or {})
        self.mode = mode

    def __getitem__(self, key: str):
        value = self.data[key]
        return value.convert() if isinstance(value, Parameter) else value

    def __setitem__(self, key: str, value):
        if self.mode == "locked":
            raise RuntimeError("Configuration is locked")
        if self.mode == "update" and key not in self.data:
            raise KeyError(f"{key} is not present and config is not in `insert` mode")
        if self.mode not in {"insert", "update"}:
            raise ValueError(f"Unsupported configuration mode `{self.mode}`")
        self.data[key] = value

    def __delitem__(self, key: str):
        if self.mode != "insert":
            raise RuntimeError("Configuration is not in `insert` mode")
        del self.data[key]

    def to_dict(self) -> dict[str, Any]:
        """dict: the current values of all parameters"""
        return {key: self[key] for key in self.data}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_dict()!r})"

    @contextlib.contextmanager
    def __call__(self, values: dict[str, Any] | None = None, **kwargs):
        """Temporarily change configuration values within a `with` block.

        Args:
            values (dict): Values to set
            **kwargs: More values to set
        """
        saved = dict(self.data)
        self.data.update(values or {}, **kwargs)
        try:
            yield
        finally:
            self.data = saved


def get_package_versions(
    packages: list[str], *, na_str="not available"
) -> dict[str, str]:
    """Determine the installed versions of python packages.

    Args:
        packages (list): Distribution names of the packages
        na_str (str): Text reported for packages that are not installed

    Returns:
        dict: The version of each package, sorted by name
    """
    versions: dict[str, str] = {}
    for name in sorted(packages):
        try:
            versions[name] = importlib.metadata.version(name)
        except importlib.metadata.PackageNotFoundError:
            versions[name] = na_str
    return versions


def environment() -> dict[str, Any]:
    """Collect information that helps reproducing a simulation.

    Returns:
        dict: Versions of python and the packages, the platform, the configuration,
        and the settings of matplotlib and numba
    """
    import matplotlib as mpl

    from .. import __version__ as package_version
    from .. import config
    from .numba import numba_environment

    return {
        "package version": package_version,
        "python version": sys.version,
        "platform": sys.platform,
        "config": config.to_dict(),
        "mandatory packages": get_package_versions(
            ["matplotlib", "numba", "numpy", "scipy", "sympy", "tqdm"]
        ),
        "optional packages": get_package_versions(["ipywidgets", "pandas"]),
        "matplotlib environment": {"backend": mpl.get_backend()},
        "numba environment": numba_environment(),
    }
