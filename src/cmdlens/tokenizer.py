"""Single-pass lexer that splits a command line into classified tokens."""

from __future__ import annotations

import logging
import re

from cmdlens.models import Token, TokenKind

log = logging.getLogger(__name__)

KNOWN_COMMANDS = frozenset({
    "grep", "awk", "sed", "find", "tar", "git", "curl", "wget", "ssh", "scp", "rsync",
    "docker", "kubectl", "npm", "pip", "apt", "yum", "systemctl", "journalctl", "ps",
    "kill", "chmod", "chown", "ls", "cd", "cp", "mv", "rm", "mkdir", "rmdir",
    "cat", "less", "more", "head", "tail", "sort", "uniq", "wc", "diff", "patch",
    "make", "gcc", "g++", "python", "node", "java", "go", "rust", "cargo",
})

QUOTE_CHARS = ("'", '"')

_WHITESPACE_RUN = re.compile(r"(\s+)")
_REDIRECT_RE = re.compile(r"^[<>&]\d*$")
_ANGLE_RE = re.compile(r"^[<>]+$")

_OPERATORS = frozenset({"&&", "||", ";", "&"})
# Segments after which the next word may be a command again.
_COMMAND_RESETS = frozenset({"|", ";", "&"})


def _classify(segment: str, command_start: bool, known_commands: frozenset[str]) -> TokenKind:
    """Return the kind of a single unquoted, non-whitespace segment."""
    if segment == "|":
        return TokenKind.PIPE
    if segment in _OPERATORS:
        return TokenKind.OPERATOR
    if _REDIRECT_RE.match(segment) or _ANGLE_RE.match(segment):
        return TokenKind.REDIRECT
    if segment.startswith("-"):
        return TokenKind.OPTION
    if command_start and segment in known_commands:
        return TokenKind.COMMAND
    # URLs, paths and anything unrecognized are arguments.
    return TokenKind.ARGUMENT


def _opens_quote(segment: str) -> bool:
    """Return whether *segment* starts a quote it does not close itself."""
    return segment[0] in QUOTE_CHARS and segment.find(segment[0], 1) == -1


def tokenize(command: str, known_commands: frozenset[str] = KNOWN_COMMANDS) -> list[Token]:
    """Split *command* into classified tokens.

    Whitespace runs are kept as ``whitespace`` tokens so that joining the text
    of every token gives back *command* unchanged.  A quoted span that crosses
    whitespace becomes one ``argument`` token with its quotes and inner
    whitespace intact; an unterminated quote runs to the end of the input.

    Args:
        command: Raw command line.  Any string is accepted.
        known_commands: Words recognized as commands at the start of the line
            or after ``|``, ``;`` and ``&``.

    Returns:
        Tokens in input order.  Empty input gives an empty list.
    """
    tokens: list[Token] = []
    command_start = True
    quote_char = ""
    quoted: list[str] = []

    for segment in _WHITESPACE_RUN.split(command):
        if not segment:
            continue

        if quote_char:
            quoted.append(segment)
            if quote_char in segment:
                tokens.append(Token(text="".join(quoted), kind=TokenKind.ARGUMENT))
                quote_char = ""
                quoted = []
            continue

        if segment.isspace():
            tokens.append(Token(text=segment, kind=TokenKind.WHITESPACE))
            continue

        if _opens_quote(segment):
            quote_char = segment[0]
            quoted = [segment]
            command_start = False
            continue

        kind = _classify(segment, command_start, known_commands)
        command_start = segment in _COMMAND_RESETS
        tokens.append(Token(text=segment, kind=kind))

    if quoted:
        log.debug("unterminated %s quote, emitting remainder as one argument", quote_char)
        tokens.append(Token(text="".join(quoted), kind=TokenKind.ARGUMENT))

    log.debug("tokenized %r into %d tokens", command, len(tokens))
    return tokens


def join_tokens(tokens: list[Token]) -> str:
    """Rebuild the original command line from its tokens."""
    return "".join(token.text for token in tokens)
