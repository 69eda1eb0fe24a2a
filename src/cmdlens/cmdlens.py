"""Core logic for cmdlens."""

import logging
from functools import lru_cache

from cmdlens.models import CommandReport
from cmdlens.safety import assess
from cmdlens.tokenizer import tokenize

log = logging.getLogger("cmdlens")
CACHE_SIZE = 256


@lru_cache(maxsize=CACHE_SIZE)
def inspect_command(command: str) -> CommandReport:
    """Tokenize and assess *command* in one call.

    Results are cached per raw input string.  Both parts are immutable, so the
    cached report can be shared between callers and threads.

    Args:
        command: Raw command line, as typed by the user.

    Returns:
        The tokens of *command* and its safety verdict.
    """
    log.debug("inspecting %r", command)
    return CommandReport(
        command=command,
        tokens=tuple(tokenize(command)),
        analysis=assess(command),
    )
