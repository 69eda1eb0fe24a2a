"""Command-line interface for cmdlens."""

import argparse
import json
import logging
import os
import sys
from collections.abc import Iterable

from cmdlens import __version__
from cmdlens.cmdlens import inspect_command
from cmdlens.config import history_path, load_config
from cmdlens.constants import BLUE, BOLD, CYAN, DIM, GREEN, MAGENTA, RED, RESET, YELLOW
from cmdlens.history import HistoryStore, command_complexity, command_type
from cmdlens.llm import explain_command
from cmdlens.models import CmdlensConfig, CommandAnalysis, HistoryItem, RiskLevel, Token, TokenKind

log = logging.getLogger(__name__)

TOKEN_COLORS = {
    TokenKind.COMMAND: BOLD + BLUE,
    TokenKind.OPTION: GREEN,
    TokenKind.ARGUMENT: YELLOW,
    TokenKind.PIPE: BOLD + MAGENTA,
    TokenKind.REDIRECT: RED,
    TokenKind.OPERATOR: CYAN,
}

RISK_COLORS = {
    RiskLevel.LOW: GREEN,
    RiskLevel.MEDIUM: YELLOW,
    RiskLevel.HIGH: RED,
    RiskLevel.CRITICAL: BOLD + RED,
}

# Flags understood by the subcommands that take a command line.  Any other word,
# dashed or not, belongs to the command; words after ``--`` always do.
COMMAND_SUBCOMMANDS = {
    "tokenize": ("Split a command into typed tokens", {
        "--json": "Print tokens as JSON",
    }),
    "assess": ("Check a command for risky operations", {
        "--json": "Print the analysis as JSON",
        "--strict": "Exit with status 1 when the command is not safe",
    }),
    "explain": ("Explain a command with an LLM", {
        "--json": "Print the explanation as JSON",
        "--no-history": "Do not save the explained command to history",
    }),
}


def _supports_color(preference: bool | None = None) -> bool:
    """Return whether ANSI color output should be used."""
    if preference is not None:
        return preference
    if os.getenv("NO_COLOR") is not None:
        return False
    if os.getenv("TERM", "").lower() == "dumb":
        return False
    return sys.stdout.isatty()


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{RESET}" if enabled and color else text


def format_tokens(tokens: tuple[Token, ...] | list[Token], color: bool) -> str:
    """Return the command line with each token colored by kind."""
    return "".join(_paint(token.text, TOKEN_COLORS.get(token.kind, ""), color) for token in tokens)


def format_analysis(analysis: CommandAnalysis, color: bool) -> str:
    """Return a human-readable safety report."""
    level = analysis.risk_level
    verdict = "safe" if analysis.is_safe else "unsafe"
    lines = [f"  risk: {_paint(level.value.upper(), RISK_COLORS[level], color)} ({verdict})"]
    for warning in analysis.warnings:
        lines.append(f"  ! {warning}")
    lines.append(f"\n  {analysis.explanation}")
    if analysis.mock_output:
        lines.append("\n  sample output:")
        lines.extend(_paint(f"    {line}", DIM, color) for line in analysis.mock_output.splitlines())
    if analysis.alternatives:
        lines.append("\n  safer alternatives:")
        lines.extend(f"    - {alternative}" for alternative in analysis.alternatives)
    if analysis.safe_flags:
        lines.append(f"\n  safe flags: {', '.join(analysis.safe_flags)}")
    return "\n".join(lines)


def _format_history_item(item: HistoryItem) -> str:
    star = "*" if item.is_favorite else " "
    tags = f"  [{', '.join(item.tags)}]" if item.tags else ""
    kind = f"  ({command_type(item.command)}, {command_complexity(item.command)})"
    return f"{star} {item.id}  {item.command}{kind}{tags}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmdlens",
        description="Break down shell commands and check them for risk before running them",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    for name, (summary, flags) in COMMAND_SUBCOMMANDS.items():
        command_parser = subparsers.add_parser(
            name,
            help=summary,
            epilog="Put -- before a command that uses -h or one of these flags.",
            allow_abbrev=False,
        )
        command_parser.add_argument("words", nargs="*", metavar="command", help="Command line")
        for flag, flag_help in flags.items():
            command_parser.add_argument(flag, action="store_true", help=flag_help)

    history_parser = subparsers.add_parser("history", help="List saved commands")
    history_group = history_parser.add_mutually_exclusive_group()
    history_group.add_argument("--search", metavar="QUERY", help="Only show matching commands")
    history_group.add_argument("--favorites", action="store_true", help="Only show favorites")
    history_group.add_argument("--tag", action="append", metavar="TAG", help="Only show tagged commands")
    history_group.add_argument(
        "--recent",
        type=float,
        metavar="DAYS",
        help="Only show commands saved in the last DAYS days",
    )
    history_group.add_argument("--favorite", metavar="ID", help="Toggle the favorite flag of an entry")
    history_group.add_argument(
        "--add-tag", nargs=2, metavar=("ID", "TAG"), help="Tag an entry"
    )
    history_group.add_argument(
        "--remove-tag", nargs=2, metavar=("ID", "TAG"), help="Remove a tag from an entry"
    )
    history_group.add_argument("--clear", action="store_true", help="Delete all saved commands")
    return parser


def command_words(tail: list[str], flags: Iterable[str]) -> list[str]:
    """Return the command words in *tail*, the arguments after a subcommand.

    Words equal to one of *flags* are options of the subcommand and are left
    out, except after a ``--`` separator.
    """
    words: list[str] = []
    separated = False
    for word in tail:
        if separated:
            words.append(word)
        elif word == "--":
            separated = True
        elif word not in flags:
            words.append(word)
    return words


def _run_tokenize(args: argparse.Namespace, color: bool) -> int:
    report = inspect_command(" ".join(args.words))
    if args.json:
        print(json.dumps([token.model_dump(mode="json") for token in report.tokens], indent=2))
        return 0
    print(f"\n  {format_tokens(report.tokens, color)}\n")
    for token in report.tokens:
        if token.kind is not TokenKind.WHITESPACE:
            print(f"  {token.kind.value:<9} {token.text}")
    return 0


def _run_assess(args: argparse.Namespace, color: bool) -> int:
    report = inspect_command(" ".join(args.words))
    analysis = report.analysis
    if args.json:
        print(analysis.model_dump_json(indent=2))
    else:
        print(f"\n  {format_tokens(report.tokens, color)}\n")
        print(format_analysis(analysis, color))
        print()
    if args.strict and not analysis.is_safe:
        return 1
    return 0


def _run_explain(args: argparse.Namespace, config: CmdlensConfig, color: bool) -> int:
    command = " ".join(args.words).strip()
    result = explain_command(command, config)
    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(f"\n  {format_tokens(inspect_command(command).tokens, color)}\n")
        for part in result.parts:
            print(f"  {_paint(part.text, BOLD, color)} ({part.type}): {part.explanation}")
        if result.overall_explanation.strip():
            print(f"\n  {result.overall_explanation}")
        if result.safety_notes.strip():
            print(f"\n  {_paint('safety:', RED, color)} {result.safety_notes}")
        for example in result.examples:
            print(f"\n  $ {example.command}\n    {example.description}")
        print()
    if not args.no_history:
        store = HistoryStore(history_path(config), max_items=config.max_history)
        store.add(command, explanation=result, analysis=inspect_command(command).analysis)
    return 0


def _run_history(args: argparse.Namespace, config: CmdlensConfig) -> int:
    store = HistoryStore(history_path(config), max_items=config.max_history)
    if args.clear:
        store.clear()
        print("History cleared.")
        return 0
    pair = args.add_tag or args.remove_tag
    entry_id = args.favorite or (pair[0] if pair else None)
    if entry_id is not None and store.get(entry_id) is None:
        print(f"Error: no history entry with id {entry_id}", file=sys.stderr)
        return 1
    if args.favorite:
        state = store.toggle_favorite(args.favorite)
        print(f"{args.favorite} {'added to' if state else 'removed from'} favorites")
        return 0
    if args.add_tag:
        item_id, tag = args.add_tag
        store.add_tag(item_id, tag)
        print(f"{item_id} tagged {tag}")
        return 0
    if args.remove_tag:
        item_id, tag = args.remove_tag
        store.remove_tag(item_id, tag)
        print(f"{item_id} untagged {tag}")
        return 0

    if args.search:
        items = store.search(args.search)
    elif args.favorites:
        items = store.favorites()
    elif args.tag:
        items = store.filter_by_tags(args.tag)
    elif args.recent is not None:
        items = store.recent(args.recent)
    else:
        items = store.items()

    if not items:
        print("No saved commands.")
    for item in items:
        print(_format_history_item(item))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    args, extras = parser.parse_known_args(argv)
    if args.subcommand == "history":
        if extras:
            parser.error(f"unrecognized arguments: {' '.join(extras)}")
    else:
        # Global options take no values, so the first match is the subcommand.
        tail = argv[argv.index(args.subcommand) + 1 :]
        args.words = command_words(tail, COMMAND_SUBCOMMANDS[args.subcommand][1])
        if not args.words:
            parser.error(f"{args.subcommand} needs a command")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    config = load_config()
    color = _supports_color(config.color)

    try:
        if args.subcommand == "tokenize":
            return _run_tokenize(args, color)
        if args.subcommand == "assess":
            return _run_assess(args, color)
        if args.subcommand == "explain":
            return _run_explain(args, config, color)
        return _run_history(args, config)
    except Exception as e:
        log.debug("%s failed", args.subcommand, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def entrypoint() -> None:
    raise SystemExit(main())
