"""Top-level package for randomtemp.

randomtemp is a transparent process proxy: it re-executes the program it
pretends to be with a fresh, uniquely named temporary directory per attempt
and retries failed attempts with a new directory. The main entry points are
`resolve_executable` and `RetryLoop`.
"""

from .resolver import resolve_executable
from .runner import RetryLoop

__all__ = ["RetryLoop", "resolve_executable", "__version__"]

__version__ = "0.1.0"
