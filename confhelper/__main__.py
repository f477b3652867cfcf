"""
Module entrypoint for the configuration helper.

This file exists so that `python -m confhelper ...` works consistently in all
environments, including when the console-script wrapper is not installed.

Notes
-----
This module contains no business logic. It delegates to the CLI module.
"""

from __future__ import annotations

from confhelper.cli import main


def _run() -> None:
    """
    Execute the configuration helper command line interface.

    Raises
    ------
    SystemExit
        Always, carrying the CLI exit code.
    """
    raise SystemExit(main())


if __name__ == "__main__":
    _run()
