"""Allow running cmdlens with ``python -m cmdlens``."""

from cmdlens.cli import entrypoint

entrypoint()
