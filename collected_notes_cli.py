#!/usr/bin/env python
"""
Entry point that delegates to collected_notes.cli.
"""
from __future__ import annotations

import sys

from collected_notes.cli import run_cli


def main() -> None:
    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
