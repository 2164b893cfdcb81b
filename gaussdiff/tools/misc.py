"""
Small helpers used across the package

.. autosummary::
   :nosignatures:

   module_available
   ensure_directory_exists
   classproperty
"""

from __future__ import annotations

import importlib.util
from pathlib import Path


def module_available(module_name: str) -> bool:
    """bool: whether the module `module_name` can be imported"""
    try:
        return importlib.util.find_spec(module_name) is not None
    except (ImportError, ValueError):
        return False


def ensure_directory_exists(folder: str | Path) -> Path:
    """create `folder` including its parents unless it exists

    Args:
        folder (str): path of the folder

    Returns:
        :class:`~pathlib.Path`: the path of the folder
    """
    path = Path(folder)
    path.mkdir(parents=True, exist_ok=True)
    return path


class classproperty(property):
    """read-only property evaluated on the class instead of an instance"""

    def __get__(self, instance, owner):
        return self.fget(owner)
