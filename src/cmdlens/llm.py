"""LLM interaction for the explain command."""

import json
import logging

import litellm
from pydantic import ValidationError

from cmdlens.models import CmdlensConfig, ExplainedPart, ExplainResponse, TokenKind
from cmdlens.prompt import build_messages
from cmdlens.safety import assess

log = logging.getLogger(__name__)

# Suppress litellm's noisy logging
litellm.suppress_debug_info = True

FALLBACK_PART_EXPLANATION = (
    "Failed to parse detailed explanation. The command appears to be a shell command."
)
FALLBACK_SAFETY_NOTES = "Please verify command safety before execution."


def _safety_summary(command: str) -> str:
    analysis = assess(command)
    lines = [f"risk level: {analysis.risk_level.value}"]
    lines.extend(f"- {warning}" for warning in analysis.warnings)
    return "\n".join(lines)


def _fallback_response(command: str, content: str) -> ExplainResponse:
    return ExplainResponse(
        parts=[
            ExplainedPart(
                text=command,
                type=TokenKind.COMMAND.value,
                explanation=FALLBACK_PART_EXPLANATION,
            )
        ],
        overall_explanation=content,
        safety_notes=FALLBACK_SAFETY_NOTES,
        examples=[],
    )


def explain_command(command: str, config: CmdlensConfig | None = None) -> ExplainResponse:
    """Ask the LLM for a part-by-part explanation of *command*.

    The local safety verdict is included in the prompt so the model's safety
    notes agree with it.

    Args:
        command: Command line to explain.
        config: cmdlens configuration; uses defaults when not provided.

    Returns:
        The parsed explanation.  When the reply is not valid JSON for
        ``ExplainResponse`` a fallback wrapping the raw reply is returned.

    Raises:
        ValueError: If *command* is empty.
        litellm.exceptions.APIConnectionError: On LLM provider connectivity errors.
        litellm.exceptions.AuthenticationError: On invalid or missing API key.
    """
    command = command.strip()
    if not command:
        raise ValueError("Command is required")

    config = config or CmdlensConfig()
    messages = build_messages(command, _safety_summary(command))
    log.debug("model=%s", config.model)
    log.debug("messages=%s", json.dumps(messages, indent=2))

    kwargs: dict[str, object] = {
        "model": config.model,
        "messages": messages,
        "temperature": config.temperature,
    }
    if config.api_key:
        kwargs["api_key"] = config.api_key

    response = litellm.completion(**kwargs)
    content = (response.choices[0].message.content or "").strip()
    log.debug("raw response: %s", content)

    try:
        data = json.loads(content)
        return ExplainResponse.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        log.warning("could not parse explain response (%s); using raw content", e)
        return _fallback_response(command, content)
