"""Prompt construction for the explain command."""

import json
from typing import TypedDict

from cmdlens.models import ExplainResponse

SYSTEM_PROMPT = f"""\
You are an expert system administrator and shell command educator. Provide \
accurate, detailed explanations of shell commands with proper safety warnings.

<critical>
Return **ONLY** valid JSON matching this schema:

{json.dumps(ExplainResponse.model_json_schema())}

Hard requirements:
- Output exactly one JSON object and nothing else.
- The first character of your response must be `{{` and the last character must be `}}`.
- Do not include markdown, code fences, comments, prefixes, or suffixes.
- Each part "type" must be one of "command", "option", "argument", "operator", "pipe", "redirect".
- Use only keys defined by the schema above.

</critical>
"""


class LLMMessage(TypedDict):
    """Single chat message for the LLM API."""

    role: str
    content: str


def build_messages(command: str, safety_summary: str = "") -> list[LLMMessage]:
    """Build the message list for an explain request."""
    parts = [f'Analyze this shell command and provide a detailed breakdown: "{command}"']

    if safety_summary:
        parts.append(f"Local safety check:\n{safety_summary}")

    parts.append(
        "Focus on accuracy and educational value. If the command contains potentially "
        "dangerous operations, clearly warn about them in safety_notes."
    )

    user_content = "\n\n".join(parts)
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]
