"""Risk classification for shell commands."""

from __future__ import annotations

import logging

from cmdlens.models import CommandAnalysis, RiskLevel
from cmdlens.rules import DEFAULT_REGISTRY, RuleRegistry

log = logging.getLogger(__name__)

EMPTY_EXPLANATION = "Empty command."
GENERIC_EXPLANATION = "Standard system command for file and process operations"
WILDCARD_WARNING = "Wildcard patterns may match more files than expected"
SYSTEM_PATH_WARNING = "Command affects system directories"
WILDCARD_CHARS = ("*", "?")


def _caution(base_command: str) -> str:
    return (
        f"This command ({base_command}) has potential risks. Consider using safer "
        "alternatives or testing in a controlled environment."
    )


def assess(command: str, registry: RuleRegistry = DEFAULT_REGISTRY) -> CommandAnalysis:
    """Assess how risky it would be to run *command*.

    The command is never executed.  Rules only ever raise the risk level; a
    command that matches no rule is safe and low risk.

    Args:
        command: Raw command line.
        registry: Rule tables to classify against.

    Returns:
        A fresh ``CommandAnalysis`` for the trimmed command.
    """
    trimmed = command.strip()
    if not trimmed:
        return CommandAnalysis(
            command=trimmed,
            is_safe=True,
            risk_level=RiskLevel.LOW,
            explanation=EMPTY_EXPLANATION,
        )

    words = trimmed.split()
    base_command = registry.lookup_key(words[0])
    warnings: list[str] = []
    risk_level = RiskLevel.LOW
    is_safe = True

    if (tier := registry.command_tier(base_command)) is not None:
        is_safe = False
        risk_level = max(risk_level, tier)
        warnings.append(f"'{base_command}' can modify system files or settings")
        if tier is RiskLevel.CRITICAL:
            warnings.append(registry.critical_note_for(base_command))

    for word in words:
        if word in registry.dangerous_flags:
            is_safe = False
            risk_level = max(risk_level, RiskLevel.MEDIUM)
            warnings.append(f"Flag '{word}' may bypass safety checks")

    if any(char in word for word in words for char in WILDCARD_CHARS):
        warnings.append(WILDCARD_WARNING)

    if any(path in word for word in words for path in registry.system_paths):
        warnings.append(SYSTEM_PATH_WARNING)

    if is_safe:
        explanation = registry.explanation_for(base_command) or GENERIC_EXPLANATION
    else:
        explanation = _caution(base_command)

    log.debug("assessed %r: risk=%s warnings=%d", trimmed, risk_level.value, len(warnings))
    return CommandAnalysis(
        command=trimmed,
        is_safe=is_safe,
        risk_level=risk_level,
        warnings=tuple(warnings),
        mock_output=registry.mock_output_for(trimmed),
        explanation=explanation,
        alternatives=registry.alternatives_for(base_command),
        safe_flags=registry.safe_flags_for(base_command),
    )


def is_command_safe(command: str, registry: RuleRegistry = DEFAULT_REGISTRY) -> bool:
    """Return whether *command* triggers no dangerous-command or flag rule."""
    return assess(command, registry).is_safe


def command_warnings(command: str, registry: RuleRegistry = DEFAULT_REGISTRY) -> tuple[str, ...]:
    """Return the warnings :func:`assess` reports for *command*."""
    return assess(command, registry).warnings
