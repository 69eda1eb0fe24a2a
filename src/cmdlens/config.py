"""Configuration for cmdlens."""

import json
import logging
import os
import secrets
import stat
from pathlib import Path
from typing import Any, TypedDict

from cmdlens.models import DEFAULT_MODEL, CmdlensConfig

log = logging.getLogger(__name__)

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "DEFAULT_MODEL",
    "HISTORY_FILE",
    "PROVIDERS",
    "CmdlensConfig",
    "load_config",
    "save_config",
    "history_path",
]

CONFIG_DIR = Path.home() / ".cmdlens"
CONFIG_FILE = CONFIG_DIR / "config.json"
HISTORY_FILE = CONFIG_DIR / "history.json"
BOOLEAN_TRUE_STRINGS = {"1", "true", "yes", "on"}
BOOLEAN_FALSE_STRINGS = {"0", "false", "no", "off"}


class ProviderInfo(TypedDict):
    env_key: str | None
    label: str


PROVIDERS: dict[str, ProviderInfo] = {
    "groq": {"env_key": "GROQ_API_KEY", "label": "Groq"},
    "openai": {"env_key": "OPENAI_API_KEY", "label": "OpenAI"},
    "anthropic": {"env_key": "ANTHROPIC_API_KEY", "label": "Anthropic"},
    "gemini": {"env_key": "GEMINI_API_KEY", "label": "Gemini"},
    "ollama": {"env_key": None, "label": "Ollama (local, no API key needed)"},
}


def provider_for_model(model: str) -> str | None:
    """Return the provider prefix of a LiteLLM model string, if known."""
    prefix, sep, _ = model.partition("/")
    if sep and prefix in PROVIDERS:
        return prefix
    return None


def load_config() -> CmdlensConfig:
    """Load config from file, with env var overrides.

    Reads ``~/.cmdlens/config.json`` and applies environment variable overrides
    (``CMDLENS_MODEL``, ``CMDLENS_COLOR`` and the provider API key var).  Falls
    back to defaults when the file is absent or contains invalid JSON.

    Returns:
        The resolved ``CmdlensConfig`` instance.
    """
    raw_config: dict[str, Any] = {}

    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE) as f:
                loaded = json.load(f)
        except json.JSONDecodeError as exc:
            log.warning(
                "invalid config JSON in %s (%s); falling back to defaults",
                CONFIG_FILE,
                exc,
            )
        else:
            if isinstance(loaded, dict):
                raw_config = loaded
            log.debug("loaded config from %s", CONFIG_FILE)

    config = CmdlensConfig.model_validate(raw_config)

    # Env var overrides
    if model := os.environ.get("CMDLENS_MODEL"):
        config.model = model
    if color_raw := os.environ.get("CMDLENS_COLOR"):
        normalized = color_raw.strip().lower()
        if normalized in BOOLEAN_TRUE_STRINGS:
            config.color = True
        elif normalized in BOOLEAN_FALSE_STRINGS:
            config.color = False

    provider = config.provider or provider_for_model(config.model)
    if provider and provider in PROVIDERS:
        env_key = PROVIDERS[provider]["env_key"]
        if env_key and (api_key := os.environ.get(env_key)):
            config.api_key = api_key

    return config


def save_config(config: CmdlensConfig) -> None:
    """Save config to file.

    Writes ``~/.cmdlens/config.json`` atomically with 0o600 permissions.

    Args:
        config: Configuration to persist.

    Raises:
        OSError: If the config directory or file cannot be created or written.
    """
    write_private_json(CONFIG_FILE, config.model_dump(exclude_none=True))
    log.debug("saved config to %s", CONFIG_FILE)


def history_path(config: CmdlensConfig) -> Path:
    """Return the history file configured in *config*."""
    if config.history_file:
        return Path(config.history_file).expanduser()
    return HISTORY_FILE


def write_private_json(path: Path, data: Any) -> None:
    """Atomically write *data* as JSON to *path*, readable only by the owner."""
    _ensure_dir_permissions(path.parent)
    # Write to a temp file opened as 0o600, then atomically replace.
    temp_file = path.parent / f".{path.name}.{os.getpid()}.{secrets.token_hex(8)}.tmp"
    fd = os.open(temp_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_file, path)
    except Exception:
        temp_file.unlink(missing_ok=True)
        raise


def _ensure_dir_permissions(directory: Path) -> None:
    """Ensure *directory* exists; the cmdlens config directory is kept owner-only."""
    directory.mkdir(parents=True, exist_ok=True, mode=0o700)
    if directory != CONFIG_DIR:
        return

    current_mode = stat.S_IMODE(directory.stat().st_mode)
    if current_mode & 0o077:
        directory.chmod(0o700)
        log.warning(
            "updated directory permissions for %s from %o to 700",
            directory,
            current_mode,
        )
