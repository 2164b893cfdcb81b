import os
import subprocess as sp
import sys
from pathlib import Path

import pytest

from gaussdiff.visualization.movies import Movie

ROOT = Path(__file__).resolve().parents[1]
SCRIPTS = sorted((ROOT / "examples").glob("*.py"))
NEEDS_FFMPEG = {"make_movie.py"}


@pytest.mark.slow
@pytest.mark.skipif(sys.platform == "win32", reason="uses unix paths")
@pytest.mark.parametrize("script", SCRIPTS, ids=lambda path: path.stem)
def test_example_runs(script, tmp_path):
    """Run an example in a fresh interpreter inside a temporary directory."""
    if script.name in NEEDS_FFMPEG and not Movie.is_available():
        pytest.skip("ffmpeg is not available")

    env = dict(os.environ, MPLBACKEND="agg")
    paths = [str(ROOT), env.get("PYTHONPATH")]
    env["PYTHONPATH"] = os.pathsep.join(path for path in paths if path)
    try:
        proc = sp.run(
            [sys.executable, str(script)],
            env=env,
            cwd=tmp_path,
            capture_output=True,
            text=True,
            timeout=120,
        )
    except sp.TimeoutExpired:
        pytest.fail(f"{script.name} did not finish within two minutes")

    assert proc.returncode == 0, f"{script.name} failed:\n{proc.stdout}\n{proc.stderr}"
