"""Module entrypoint for running the proxy as ``python -m randomtemp``.

This module is also used by PyInstaller builds to provide a stable entry
script for frozen ``randomtemp`` executables.
"""

from __future__ import annotations

from randomtemp.cli import main


if __name__ == "__main__":
    main()
