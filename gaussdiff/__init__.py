"""The gaussdiff package simulates diffusing Gaussians and measures their spreading."""

# version of the installed distribution
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gaussdiff")
except PackageNotFoundError:
    # running from a source checkout without installation
    __version__ = "unknown"
del PackageNotFoundError, version

# global settings, see :mod:`gaussdiff.tools.config`
from .tools.config import Config, Parameter, environment  # noqa: F401

config = Config()

# public API
from .diagnostics import *  # noqa: F403
from .experiments import *  # noqa: F403
from .fields import *  # noqa: F403
from .grids import *  # noqa: F403
from .pdes import *  # noqa: F403
from .solvers import *  # noqa: F403
from .trackers import *  # noqa: F403
from .visualization import *  # noqa: F403

del Config
