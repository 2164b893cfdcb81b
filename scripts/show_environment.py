#!/usr/bin/env python3
"""
Prints the versions of python, gaussdiff and its dependencies together with the
current configuration, which helps when reporting problems with a simulation
"""

import sys
from pathlib import Path

PACKAGE_PATH = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PACKAGE_PATH))

from gaussdiff import environment  # noqa: E402


def main():
    """print all categories of the environment"""
    for category, data in environment().items():
        if isinstance(data, dict):
            print(f"\n{category}:")
            width = max((len(str(key)) for key in data), default=0)
            for key, value in data.items():
                print(f"    {str(key).ljust(width)} : {value}")
        else:
            print(f"{category}: {str(data).replace(chr(10), chr(10) + '    ')}")


if __name__ == "__main__":
    main()
