"""
Writing movies of the concentration frame by frame

.. autosummary::
   :nosignatures:

   Movie
"""

from __future__ import annotations

import logging
from pathlib import Path

from .. import config

_logger = logging.getLogger(__name__)


class Movie:
    """Movie assembled from matplotlib figures

    Frames are piped to `ffmpeg` using :class:`matplotlib.animation.FFMpegWriter`, so
    the `ffmpeg` executable needs to be found by matplotlib. The movie can be used
    as a context manager, which finishes the file when the block ends:

    .. code-block:: python

        with Movie("diffusion.mp4") as movie:
            for field in fields:
                update_concentration_plot(ref, field)
                movie.add_figure(ref.fig)
    """

    def __init__(
        self,
        filename: str | Path,
        framerate: float | None = None,
        dpi: float | None = None,
        **kwargs,
    ):
        r"""
        Args:
            filename (str):
                Path of the movie file. The suffix selects the codec.
            framerate (float):
                Frames per second. Defaults to the configuration value
                `movie.framerate`.
            dpi (float):
                Resolution of the frames. Defaults to the configuration value
                `movie.dpi`.
            \**kwargs:
                Extra arguments of :class:`matplotlib.animation.FFMpegWriter`, e.g.,
                `bitrate`
        """
        if not self.is_available():
            raise RuntimeError(
                "Writing movies requires ffmpeg, which matplotlib could not find. See "
                "ffmpeg.org for installation instructions."
            )
        self.filename = str(filename)
        self.framerate = config["movie.framerate"] if framerate is None else framerate
        self.dpi = config["movie.dpi"] if dpi is None else dpi
        self.kwargs = kwargs
        self.frames = 0
        self._writer = None

    @classmethod
    def is_available(cls) -> bool:
        """bool: whether matplotlib can write movies with ffmpeg"""
        from matplotlib.animation import FFMpegWriter

        return bool(FFMpegWriter.isAvailable())

    def __enter__(self) -> Movie:
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        self.save()

    def add_figure(self, fig=None) -> None:
        """Append a figure as the next frame

        Args:
            fig (:class:`~matplotlib.figure.Figure`):
                The figure to add. Defaults to the current figure of pyplot.
        """
        if fig is None:
            import matplotlib.pyplot as plt

            fig = plt.gcf()

        if self._writer is None:
            from matplotlib.animation import FFMpegWriter

            self._writer = FFMpegWriter(fps=self.framerate, **self.kwargs)
            self._writer.setup(fig, self.filename, dpi=self.dpi)
        else:
            self._writer.fig = fig  # frames may come from a new figure

        # an opaque background avoids artifacts from antialiasing
        self._writer.grab_frame(facecolor="white")
        self.frames += 1

    def save(self) -> None:
        """Finish writing the movie file"""
        if self._writer is None:
            return
        self._writer.finish()
        self._writer = None
        _logger.info("Wrote movie `%s` with %d frames", self.filename, self.frames)
