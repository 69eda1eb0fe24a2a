"""cmdlens - shell command breakdown and safety checks."""

from importlib.metadata import PackageNotFoundError, version

from cmdlens.cmdlens import inspect_command
from cmdlens.safety import assess
from cmdlens.tokenizer import tokenize

try:
    __version__ = version("cmdlens")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__", "assess", "inspect_command", "tokenize"]
