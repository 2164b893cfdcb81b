"""Progress bars shown while simulations run.

.. autosummary::
   :nosignatures:

   get_progress_bar_class
"""

from __future__ import annotations

import tqdm

from .misc import module_available


def get_progress_bar_class(fancy: bool = True) -> type[tqdm.tqdm]:
    """Return the tqdm class used for progress bars.

    Args:
        fancy (bool):
            Use the widget-based bar of :mod:`tqdm.auto` in jupyter notebooks. This
            requires :mod:`ipywidgets`; otherwise the text bar is used.

    Returns:
        type: A subclass of :class:`tqdm.tqdm`
    """
    if fancy and module_available("ipywidgets"):
        from tqdm.auto import tqdm as auto_tqdm

        return auto_tqdm
    return tqdm.tqdm
