"""Static rule registry used by the risk classifier."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from cmdlens.models import RiskLevel


@dataclass(frozen=True)
class MockOutputRule:
    """Sample output shown for commands matching ``pattern``.

    Rules are tried in ascending ``priority`` order and the first match wins.
    """

    priority: int
    pattern: re.Pattern[str]
    output: str
    examples: tuple[str, ...] = ()

    def matches(self, command: str) -> bool:
        return self.pattern.search(command) is not None


def _freeze(mapping: Mapping[str, Iterable[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({key: tuple(values) for key, values in mapping.items()})


@dataclass(frozen=True)
class RuleRegistry:
    """Read-only knowledge base for :func:`cmdlens.safety.assess`.

    Command keys are lower-case and looked up case-insensitively.  Flags and
    system paths are matched case-sensitively.
    """

    dangerous_commands: Mapping[str, RiskLevel]
    dangerous_flags: frozenset[str]
    system_paths: tuple[str, ...]
    explanations: Mapping[str, str] = field(default_factory=dict)
    alternatives: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    safe_flags: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    mock_outputs: tuple[MockOutputRule, ...] = ()
    critical_notes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("dangerous_commands", "explanations", "alternatives", "safe_flags", "critical_notes"):
            table = getattr(self, name)
            bad = sorted(key for key in table if key != key.lower())
            if bad:
                raise ValueError(f"{name} keys must be lower-case: {', '.join(bad)}")
            if name in ("alternatives", "safe_flags"):
                object.__setattr__(self, name, _freeze(table))
            elif not isinstance(table, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(table)))
        # Tiers may be given as plain strings; RiskLevel raises ValueError on unknown ones.
        tiers = {name: RiskLevel(level) for name, level in self.dangerous_commands.items()}
        for level in tiers.values():
            if level < RiskLevel.HIGH:
                raise ValueError(f"dangerous commands must be at least high risk, got {level.value}")
        object.__setattr__(self, "dangerous_commands", MappingProxyType(tiers))
        ordered = tuple(sorted(self.mock_outputs, key=lambda rule: rule.priority))
        priorities = [rule.priority for rule in ordered]
        if len(set(priorities)) != len(priorities):
            raise ValueError("mock output priorities must be unique")
        object.__setattr__(self, "mock_outputs", ordered)
        object.__setattr__(self, "dangerous_flags", frozenset(self.dangerous_flags))
        object.__setattr__(self, "system_paths", tuple(self.system_paths))

    @staticmethod
    def lookup_key(word: str) -> str:
        """Return the normalized key used for base-command lookups."""
        return word.lower()

    def command_tier(self, command: str) -> RiskLevel | None:
        return self.dangerous_commands.get(self.lookup_key(command))

    def explanation_for(self, command: str) -> str | None:
        return self.explanations.get(self.lookup_key(command))

    def alternatives_for(self, command: str) -> tuple[str, ...]:
        return self.alternatives.get(self.lookup_key(command), ())

    def safe_flags_for(self, command: str) -> tuple[str, ...]:
        return self.safe_flags.get(self.lookup_key(command), ())

    def critical_note_for(self, command: str) -> str:
        key = self.lookup_key(command)
        return self.critical_notes.get(key, f"{key} command can cause irreversible damage")

    def mock_output_for(self, command: str) -> str | None:
        """Return the output of the first matching mock rule, if any."""
        for rule in self.mock_outputs:
            if rule.matches(command):
                return rule.output
        return None


_HIGH_RISK_COMMANDS = (
    "del", "rmdir", "format", "fdisk", "dd",
    "chmod", "chown", "chgrp", "usermod", "userdel",
    "shutdown", "reboot", "poweroff", "halt",
    "iptables", "ufw", "firewall-cmd",
    "mount", "umount", "mkfs", "fsck",
    "kill", "killall", "pkill",
    "sudo", "su", "passwd",
)

DANGEROUS_COMMANDS: dict[str, RiskLevel] = {
    **{name: RiskLevel.HIGH for name in _HIGH_RISK_COMMANDS},
    "rm": RiskLevel.CRITICAL,
}

DANGEROUS_FLAGS = frozenset({
    "-rf", "-fr", "-r", "-f", "--force", "--no-preserve-root",
    "-y", "--yes", "--assume-yes", "--no-confirm",
})

SYSTEM_PATHS = ("/etc/", "/usr/", "/var/", "/sys/", "/proc/", "/dev/")

CRITICAL_NOTES = {
    "rm": "rm command can permanently delete files",
}

EXPLANATIONS = {
    "ls": "Lists files and directories in the current location",
    "find": "Searches for files and directories based on criteria",
    "grep": "Searches for text patterns in files",
    "tar": "Creates or extracts compressed archive files",
    "curl": "Transfers data to/from URLs (safe for reading)",
    "git": "Version control system commands",
    "ps": "Shows running processes",
    "df": "Shows disk space usage",
}

ALTERNATIVES = {
    "rm": [
        "Use trash-cli: `trash-put filename` (moves to trash)",
        "Use safe-rm: `safe-rm filename` (has built-in protections)",
        "Move to .trash directory: `mv filename ~/.trash/`",
    ],
    "find": [
        'Add -type f to only find files: `find . -type f -name "*.txt"`',
        "Use -print0 with xargs for safer handling",
    ],
    "chmod": [
        "Use symbolic modes: `chmod u+x script.sh` instead of numeric",
        "Check current permissions first: `ls -la filename`",
    ],
}

SAFE_FLAGS = {
    "ls": ["-la", "-lh", "-ltr", "-1"],
    "find": ["-type f", "-type d", "-name", "-iname"],
    "grep": ["-i", "-n", "-r", "-l"],
    "tar": ["-tzf", "-czf", "-xzf"],
    "curl": ["-I", "-s", "-L", "-o"],
}

MOCK_OUTPUTS = (
    MockOutputRule(
        priority=10,
        pattern=re.compile(r"^ls(?:\s|$)"),
        output="file1.txt  file2.js  documents/  pictures/  downloads/",
        examples=("ls -la", "ls -lh", "ls *.txt"),
    ),
    MockOutputRule(
        priority=20,
        pattern=re.compile(r"^find\s+"),
        output="./documents/report.pdf\n./pictures/vacation.jpg\n./downloads/installer.sh",
        examples=('find . -name "*.txt"', "find /home -type f"),
    ),
    MockOutputRule(
        priority=30,
        pattern=re.compile(r"^grep\s+"),
        output=(
            "line 42: const result = data.filter(item => item.active)\n"
            "line 156: return activeItems.length"
        ),
        examples=('grep -r "pattern" .', 'grep "error" log.txt'),
    ),
    MockOutputRule(
        priority=40,
        pattern=re.compile(r"^tar\s+"),
        output="archive.tar.gz\nfile1.txt\nfile2.js\ndocuments/",
        examples=("tar -xzvf archive.tar.gz", "tar -czf backup.tar.gz folder/"),
    ),
    MockOutputRule(
        priority=50,
        pattern=re.compile(r"^curl\s+"),
        output='HTTP/1.1 200 OK\nContent-Type: application/json\n{"status": "success", "data": {...}}',
        examples=("curl https://api.example.com", 'curl -X POST -d "data" url'),
    ),
    MockOutputRule(
        priority=60,
        pattern=re.compile(r"^git\s+"),
        output=(
            "On branch main\n"
            "Your branch is up to date with 'origin/main'.\n"
            "\n"
            "nothing to commit, working tree clean"
        ),
        examples=("git status", "git log --oneline", "git diff HEAD~1"),
    ),
    MockOutputRule(
        priority=70,
        pattern=re.compile(r"^ps\s+"),
        output=(
            "  PID TTY          TIME CMD\n"
            " 1234 pts/0    00:00:00 bash\n"
            " 5678 pts/0    00:00:01 node\n"
            " 9012 pts/0    00:00:00 ps"
        ),
        examples=("ps aux", "ps -ef | grep node"),
    ),
    MockOutputRule(
        priority=80,
        pattern=re.compile(r"^df\s+"),
        output=(
            "Filesystem     1K-blocks    Used Available Use% Mounted on\n"
            "/dev/sda1       10255636 3567096   6174468  37% /\n"
            "tmpfs             816896       0    816896   0% /dev/shm"
        ),
        examples=("df -h", "df -T"),
    ),
)


def build_default_registry() -> RuleRegistry:
    """Build the registry shipped with cmdlens."""
    return RuleRegistry(
        dangerous_commands=DANGEROUS_COMMANDS,
        dangerous_flags=DANGEROUS_FLAGS,
        system_paths=SYSTEM_PATHS,
        explanations=EXPLANATIONS,
        alternatives=ALTERNATIVES,
        safe_flags=SAFE_FLAGS,
        mock_outputs=MOCK_OUTPUTS,
        critical_notes=CRITICAL_NOTES,
    )


DEFAULT_REGISTRY = build_default_registry()
