"""Data models for cmdlens."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL = "groq/llama-3.3-70b-versatile"
DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_HISTORY = 100


class TokenKind(str, Enum):
    """Lexical category of a token."""

    COMMAND = "command"
    OPTION = "option"
    ARGUMENT = "argument"
    PIPE = "pipe"
    REDIRECT = "redirect"
    OPERATOR = "operator"
    WHITESPACE = "whitespace"


class RiskLevel(str, Enum):
    """Severity of executing a command, ordered low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(RiskLevel).index(self)

    def __lt__(self, other):
        if isinstance(other, RiskLevel):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, RiskLevel):
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, RiskLevel):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, RiskLevel):
            return self.rank >= other.rank
        return NotImplemented


class Token(BaseModel):
    """A classified substring of a command line."""

    model_config = ConfigDict(frozen=True)

    text: str
    kind: TokenKind


class CommandAnalysis(BaseModel):
    """Safety verdict for a single command string."""

    model_config = ConfigDict(frozen=True)

    command: str
    is_safe: bool
    risk_level: RiskLevel
    warnings: tuple[str, ...] = ()
    mock_output: str | None = None
    explanation: str
    alternatives: tuple[str, ...] = ()
    safe_flags: tuple[str, ...] = ()


class CommandReport(BaseModel):
    """Tokens and safety verdict for the same input."""

    model_config = ConfigDict(frozen=True)

    command: str
    tokens: tuple[Token, ...]
    analysis: CommandAnalysis


class ExplainedPart(BaseModel):
    """One piece of an explained command."""

    text: str = Field(description="The exact text of this part of the command.")
    type: str = Field(description=(
        "One of 'command', 'option', 'argument', 'operator', 'pipe', 'redirect'."
    ))
    explanation: str = Field(default="", description="What this part does, in detail.")
    man_page: str | None = Field(
        default=None,
        description="Optional command name to look up in the manual, e.g. 'grep'.",
    )


class ExplainExample(BaseModel):
    """A related command suggested alongside an explanation."""

    command: str = Field(description="A similar, copy-pasteable example command.")
    description: str = Field(default="", description="One sentence describing the example.")


class ExplainResponse(BaseModel):
    """Breakdown of a command returned by the explain service."""

    parts: list[ExplainedPart] = Field(default_factory=list, description=(
        "Every part of the command in order, each with its type and explanation."
    ))
    overall_explanation: str = Field(default="", description=(
        "A comprehensive explanation of what the entire command does."
    ))
    safety_notes: str = Field(default="", description=(
        "Important safety warnings or considerations. Empty if none apply."
    ))
    examples: list[ExplainExample] = Field(default_factory=list, description=(
        "Two or three similar example commands with brief descriptions."
    ))


class HistoryItem(BaseModel):
    """A saved command together with its explanation."""

    id: str
    command: str
    parts: list[ExplainedPart] = Field(default_factory=list)
    overall_explanation: str = ""
    safety_notes: str = ""
    examples: list[ExplainExample] = Field(default_factory=list)
    risk_level: RiskLevel | None = None
    timestamp: float
    is_favorite: bool = False
    tags: list[str] = Field(default_factory=list)


class CmdlensConfig(BaseModel):
    """Runtime configuration for cmdlens."""

    provider: str | None = Field(
        default=None,
        description="Active LLM provider (e.g. 'groq', 'openai', 'anthropic', 'gemini').",
    )
    model: str = Field(
        default=DEFAULT_MODEL,
        description="LiteLLM model string used by the explain command.",
    )
    api_key: str | None = Field(
        default=None,
        description=(
            "API key for the active provider. Overridden at runtime by the provider's "
            "environment variable (e.g. GROQ_API_KEY)."
        ),
    )
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE,
        ge=0,
        le=2,
        description="Sampling temperature for explain requests.",
    )
    history_file: str | None = Field(
        default=None,
        description="Path of the history JSON file. Defaults to ~/.cmdlens/history.json.",
    )
    max_history: int = Field(
        default=DEFAULT_MAX_HISTORY,
        gt=0,
        description="Maximum number of history entries kept on disk.",
    )
    color: bool | None = Field(
        default=None,
        description=(
            "Force colored output on or off. None detects from the terminal. "
            "Overridden by CMDLENS_COLOR."
        ),
    )
