#!/usr/bin/env python3
"""
Runs the code style checks and the unit tests of gaussdiff.

Without arguments, all checks are run. Arguments after `--` are passed on to pytest,
e.g., `run_tests.py --unit -- --maxfail=1`.
"""

from __future__ import annotations

import argparse
import os
import subprocess as sp
import sys
from pathlib import Path

PACKAGE = "gaussdiff"
PACKAGE_PATH = Path(__file__).resolve().parents[1]


def most_severe(retcodes: list[int]) -> int:
    """return the exit code with the largest magnitude (0 if all succeeded)"""
    return max(retcodes, key=abs, default=0)


def check_codestyle(verbose: bool = True) -> int:
    """Check the package and the examples with ruff.

    Args:
        verbose (bool): Whether to print which folder is checked

    Returns:
        int: The most severe exit code of ruff
    """
    retcodes = []
    for folder in [PACKAGE, "examples", "tests"]:
        if verbose:
            print(f"Checking code style of `{folder}`...")
        retcodes.append(sp.run(["ruff", "check", PACKAGE_PATH / folder]).returncode)
    return most_severe(retcodes)


def run_unit_tests(args: argparse.Namespace) -> int:
    """Run pytest on the tests folder.

    Args:
        args (:class:`argparse.Namespace`): The parsed command line arguments

    Returns:
        int: The exit code of pytest
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = f"{PACKAGE_PATH}{os.pathsep}{env.get('PYTHONPATH', '')}"
    env["MPLBACKEND"] = "agg"
    if args.nojit:
        env["NUMBA_DISABLE_JIT"] = "1"
    else:
        env["NUMBA_BOUNDSCHECK"] = "1"

    cmd = [sys.executable, "-m", "pytest", "-c", "pyproject.toml", "-rs", "-rw"]
    if args.runslow:
        cmd.append("--runslow")
    num_cores = os.cpu_count() if args.num_cores == "auto" else int(args.num_cores)
    if num_cores > 1:
        cmd += ["-n", str(num_cores), "--durations=10"]  # requires pytest-xdist
    if args.pattern:
        cmd += ["-k", args.pattern]
    if args.coverage:
        cmd += ["--cov-config=pyproject.toml", f"--cov={PACKAGE}"]
        cmd += ["--cov-report", "html:scripts/coverage"]
    cmd += args.pytest_args + ["tests"]

    return sp.run(cmd, env=env, cwd=PACKAGE_PATH).returncode


def main() -> int:
    """parse the command line and run the selected checks"""
    parser = argparse.ArgumentParser(description=f"Run tests of `{PACKAGE}`.")
    parser.add_argument("-s", "--style", action="store_true", help="check code style")
    parser.add_argument("-u", "--unit", action="store_true", help="run unit tests")
    parser.add_argument("-q", "--quiet", action="store_true", help="less output")
    parser.add_argument(
        "--runslow", action="store_true", help="also run slow tests and the examples"
    )
    parser.add_argument(
        "--showconfig", action="store_true", help="show the package environment"
    )
    parser.add_argument("--coverage", action="store_true", help="record coverage")
    parser.add_argument(
        "--num_cores", default="1", help="number of cores (`auto` uses all)"
    )
    parser.add_argument("--nojit", action="store_true", help="disable numba")
    parser.add_argument("--pattern", help="only run tests matching this pattern")
    parser.add_argument("pytest_args", nargs="*", help=argparse.SUPPRESS)
    args = parser.parse_args()

    if args.showconfig:
        sp.run([sys.executable, PACKAGE_PATH / "scripts" / "show_environment.py"])

    run_all = not (args.style or args.unit or args.showconfig)
    retcodes = []
    if run_all or args.style:
        retcodes.append(check_codestyle(verbose=not args.quiet))
    if run_all or args.unit:
        retcodes.append(run_unit_tests(args))
    return most_severe(retcodes)


if __name__ == "__main__":
    sys.exit(main())
