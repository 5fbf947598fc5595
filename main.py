#!/usr/bin/env python3
"""Repo-root entry point.

    python main.py                      # uses config.yaml
    python main.py --algorithm compare  # any jobshop CLI flag works

Without ``--config`` the ``config.yaml`` next to this file is used when it
exists.
"""

import os
import sys

from jobshop.cli import main as cli_main

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.yaml")


def main() -> int:
    argv = sys.argv[1:]
    if "--config" not in argv and os.path.isfile(DEFAULT_CONFIG):
        argv = ["--config", DEFAULT_CONFIG, *argv]
    return cli_main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
