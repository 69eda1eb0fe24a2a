"""Saved command history with search and tagging."""

import logging
import re
import secrets
import time
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from cmdlens.config import write_private_json
from cmdlens.models import DEFAULT_MAX_HISTORY, CommandAnalysis, ExplainResponse, HistoryItem

log = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

_ITEMS_ADAPTER = TypeAdapter(list[HistoryItem])

COMMAND_TYPES = {
    "ls": "file-listing",
    "find": "search",
    "grep": "text-search",
    "tar": "archive",
    "git": "version-control",
    "curl": "network",
    "wget": "network",
    "docker": "container",
    "kubectl": "kubernetes",
    "ps": "process",
    "df": "disk-usage",
    "chmod": "permissions",
    "chown": "ownership",
}


def command_type(command: str) -> str:
    """Return a coarse category for *command* based on its first word."""
    words = command.split()
    if not words:
        return "general"
    return COMMAND_TYPES.get(words[0].lower(), "general")


def command_complexity(command: str) -> str:
    """Rate *command* as ``simple``, ``moderate`` or ``complex``.

    Words count once; pipes and redirection characters count twice.
    """
    words = len(command.split())
    pipes = command.count("|")
    redirects = len(re.findall(r"[<>]", command))
    total = words + pipes * 2 + redirects * 2
    if total <= 3:
        return "simple"
    if total <= 6:
        return "moderate"
    return "complex"


def _new_id() -> str:
    return secrets.token_hex(8)


class HistoryStore:
    """JSON-file backed list of saved commands, newest first."""

    def __init__(self, path: Path, max_items: int = DEFAULT_MAX_HISTORY):
        self.path = Path(path)
        self.max_items = max_items

    def items(self) -> list[HistoryItem]:
        """Return all saved items, newest first.

        A missing file is an empty history.  An unreadable or malformed file is
        logged and treated as empty.
        """
        if not self.path.exists():
            return []
        try:
            # Invalid UTF-8 surfaces as a ValidationError, like malformed JSON.
            return _ITEMS_ADAPTER.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as exc:
            log.warning("could not read history from %s (%s); ignoring it", self.path, exc)
            return []

    def _save(self, items: list[HistoryItem]) -> None:
        write_private_json(self.path, _ITEMS_ADAPTER.dump_python(items, mode="json"))
        log.debug("saved %d history items to %s", len(items), self.path)

    def add(
        self,
        command: str,
        explanation: ExplainResponse | None = None,
        analysis: CommandAnalysis | None = None,
    ) -> HistoryItem:
        """Save *command* as the newest entry, replacing earlier copies of it."""
        explanation = explanation or ExplainResponse()
        item = HistoryItem(
            id=_new_id(),
            command=command,
            parts=explanation.parts,
            overall_explanation=explanation.overall_explanation,
            safety_notes=explanation.safety_notes,
            examples=explanation.examples,
            risk_level=analysis.risk_level if analysis else None,
            timestamp=time.time(),
        )
        others = [existing for existing in self.items() if existing.command != command]
        self._save([item, *others][: self.max_items])
        return item

    def get(self, item_id: str) -> HistoryItem | None:
        for item in self.items():
            if item.id == item_id:
                return item
        return None

    def toggle_favorite(self, item_id: str) -> bool:
        """Flip the favorite flag of an item and return its new value.

        Returns ``False`` when no item has *item_id*.
        """
        items = self.items()
        for item in items:
            if item.id == item_id:
                item.is_favorite = not item.is_favorite
                self._save(items)
                return item.is_favorite
        return False

    def add_tag(self, item_id: str, tag: str) -> None:
        items = self.items()
        for item in items:
            if item.id == item_id and tag not in item.tags:
                item.tags.append(tag)
                self._save(items)
                return

    def remove_tag(self, item_id: str, tag: str) -> None:
        items = self.items()
        for item in items:
            if item.id == item_id and tag in item.tags:
                item.tags = [t for t in item.tags if t != tag]
                self._save(items)
                return

    def search(self, query: str) -> list[HistoryItem]:
        """Return items whose command, explanation or tags contain *query*."""
        needle = query.lower()
        return [
            item
            for item in self.items()
            if needle in item.command.lower()
            or needle in item.overall_explanation.lower()
            or any(needle in tag.lower() for tag in item.tags)
        ]

    def favorites(self) -> list[HistoryItem]:
        return [item for item in self.items() if item.is_favorite]

    def filter_by_tags(self, tags: Iterable[str]) -> list[HistoryItem]:
        """Return items carrying every tag in *tags*."""
        wanted = list(tags)
        return [item for item in self.items() if all(tag in item.tags for tag in wanted)]

    def recent(self, days: float = 7, now: float | None = None) -> list[HistoryItem]:
        cutoff = (time.time() if now is None else now) - days * SECONDS_PER_DAY
        return [item for item in self.items() if item.timestamp > cutoff]

    def clear(self) -> None:
        self._save([])
