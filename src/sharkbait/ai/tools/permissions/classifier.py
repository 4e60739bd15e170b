"""Command safety classifier for shell command execution.

Decides whether a literal shell command may run and, when it may, how hard
its effects are to undo. Policy lives in two ordered rule tables evaluated
first-match-wins:

1. ``BLOCKING_RULES``: any match is a hard stop. The command is classified
   IRREVERSIBLE with ``blocked=True`` and must never be executed.
2. ``CLASSIFICATION_RULES``: consulted only when nothing blocked. The first
   matching rule decides tier, confirmation requirement and undo hint, so the
   order of this table is part of its behaviour.

Commands matching no rule fall back to ``DEFAULT_CLASSIFICATION``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sharkbait.ai.tools.base import Reversibility

__all__ = [
    "BLOCKING_RULES",
    "CLASSIFICATION_RULES",
    "DEFAULT_CLASSIFICATION",
    "Classification",
    "CommandClassifier",
    "CommandRule",
]


@dataclass(frozen=True)
class Classification:
    """Reversibility judgment for a command.

    Attributes:
        reversibility: How hard the command's effects are to undo
        requires_confirmation: Whether a human should confirm before running
        undo_hint: Optional human-readable hint for reverting the action
        blocked: True when a hard-blocking rule matched
        reason: Description of the rule that produced this result
    """

    reversibility: Reversibility
    requires_confirmation: bool
    undo_hint: str | None = None
    blocked: bool = False
    reason: str = ""


@dataclass(frozen=True)
class CommandRule:
    """One row of a rule table: a matcher and the outcome it produces."""

    pattern: re.Pattern[str]
    outcome: Classification
    description: str

    def matches(self, command: str) -> bool:
        return self.pattern.search(command) is not None


def _rule(
    pattern: str,
    reversibility: Reversibility,
    requires_confirmation: bool,
    description: str,
    undo_hint: str | None = None,
    flags: int = 0,
    blocked: bool = False,
) -> CommandRule:
    return CommandRule(
        pattern=re.compile(pattern, flags),
        outcome=Classification(
            reversibility=reversibility,
            requires_confirmation=requires_confirmation,
            undo_hint=undo_hint,
            blocked=blocked,
            reason=description,
        ),
        description=description,
    )


def _block(pattern: str, description: str, flags: int = 0) -> CommandRule:
    return _rule(
        pattern,
        Reversibility.IRREVERSIBLE,
        True,
        description,
        flags=flags,
        blocked=True,
    )


def _irreversible(pattern: str, description: str, flags: int = 0) -> CommandRule:
    return _rule(
        pattern, Reversibility.IRREVERSIBLE, True, description, flags=flags
    )


# rm followed by one or more flag groups containing a recursive flag
_RECURSIVE_RM = r"\brm\s+(?:-[a-zA-Z]*\s+)*-[a-zA-Z]*[rR][a-zA-Z]*\s+(?:-\S+\s+)*"
_END = r"(?=\s|$|[;&|])"
_QUOTE = r"['\"]?"
_FORK_BOMB = r":\s*\(\s*\)\s*\{\s*:\s*\|\s*:\s*&\s*\}"

BLOCKING_RULES: tuple[CommandRule, ...] = (
    _block(
        _RECURSIVE_RM + _QUOTE + r"/+\*?" + _QUOTE + _END,
        "recursive deletion of filesystem root",
    ),
    _block(
        _RECURSIVE_RM
        + _QUOTE
        + r"(?:~|\$HOME|\$\{HOME\})"
        + _QUOTE
        + r"/?\*?"
        + _QUOTE
        + _END,
        "recursive deletion of home directory",
    ),
    _block(
        _RECURSIVE_RM + _QUOTE + r"(?:\./)?\*" + _QUOTE + _END,
        "recursive wildcard deletion",
    ),
    _block(
        r">\s*/dev/(?:sd[a-z]|hd[a-z]|vd[a-z]|xvd[a-z]|nvme\d|mmcblk\d|disk\d)",
        "write to raw block device",
    ),
    _block(r"\bmkfs(?:\.\w+)?\s.*/dev/\w", "filesystem creation on a device"),
    _block(r"\bdd\s+(?=.*\bif=\S)(?=.*\bof=\S)", "low-level disk overwrite"),
    _block(_FORK_BOMB, "fork bomb"),
    _block(r"\bDROP\s+DATABASE\b", "SQL database drop", re.IGNORECASE),
    _block(r"\bTRUNCATE\s+TABLE\b", "SQL table truncation", re.IGNORECASE),
    _block(
        r"\bDELETE\s+FROM\s+[\w.\"`]+\s*;?\s*[\"']?\s*$",
        "unconditional SQL delete",
        re.IGNORECASE,
    ),
    _block(
        r"\bchmod\s+(?:-\w+\s+)*0?777\s+/",
        "world-writable permissions on absolute path",
    ),
    _block(
        r"\b(?:curl|wget)\b.*\|\s*(?:sudo\s+)?"
        r"(?:(?:ba|z|da|k)?sh|python[\d.]*|perl|ruby|node)\b",
        "downloaded script piped into interpreter",
    ),
    _block(r"\bnc\s+(?:\S+\s+)*-e\b", "netcat reverse shell"),
    _block(r"\bbash\s+-i\s+>&", "interactive reverse shell"),
)

CLASSIFICATION_RULES: tuple[CommandRule, ...] = (
    _irreversible(r"rm\s+-rf\s+[/~]", "recursive delete of absolute or home path"),
    _irreversible(r"rm\s+-rf\s+\*", "recursive wildcard delete"),
    _irreversible(r">\s*/dev/sd", "write to disk device"),
    _irreversible(r"mkfs", "filesystem creation"),
    _irreversible(r"dd\s+if=", "raw disk copy"),
    _irreversible(_FORK_BOMB, "fork bomb"),
    _irreversible(r"DROP\s+DATABASE", "SQL database drop", re.IGNORECASE),
    _irreversible(r"TRUNCATE\s+TABLE", "SQL table truncation", re.IGNORECASE),
    _irreversible(
        r"DELETE\s+FROM\s+\w+\s*;?\s*$", "unconditional SQL delete", re.IGNORECASE
    ),
    _rule(
        r"git\s+push\s+.*--force",
        Reversibility.EFFORT,
        True,
        "forced git push",
        undo_hint="git reflog + push",
    ),
    _rule(r"npm\s+publish", Reversibility.EFFORT, True, "package publish"),
    _rule(
        r"git\s+push",
        Reversibility.EFFORT,
        False,
        "git push",
        undo_hint="git revert or git push --force (with care)",
    ),
    _rule(
        r"git\s+checkout",
        Reversibility.EASY,
        False,
        "git checkout",
        undo_hint="git checkout -",
    ),
    _rule(
        r"git\s+branch\s+-d",
        Reversibility.EASY,
        False,
        "git branch delete",
        undo_hint="git branch <name> <sha>",
    ),
    _rule(r"mkdir", Reversibility.EASY, False, "directory creation", undo_hint="rmdir"),
)

# Unknown commands are neither assumed safe nor assumed catastrophic.
DEFAULT_CLASSIFICATION = Classification(
    reversibility=Reversibility.EFFORT,
    requires_confirmation=False,
    reason="no matching rule",
)


class CommandClassifier:
    """Classifies shell commands by reversibility using ordered rule tables.

    Classification is total and deterministic: every string produces a
    ``Classification`` and the same string always produces the same one for
    a given pair of tables.

    Example:
        >>> classifier = CommandClassifier()
        >>> classifier.is_blocked("rm -rf /")
        True
        >>> result = classifier.classify("git push --force origin main")
        >>> result.reversibility, result.requires_confirmation
        (<Reversibility.EFFORT: 'effort'>, True)
        >>> classifier.classify("mkdir build").undo_hint
        'rmdir'
    """

    def __init__(
        self,
        blocking_rules: tuple[CommandRule, ...] = BLOCKING_RULES,
        classification_rules: tuple[CommandRule, ...] = CLASSIFICATION_RULES,
        default: Classification = DEFAULT_CLASSIFICATION,
    ) -> None:
        """Initialize classifier with rule tables.

        Args:
            blocking_rules: Rules whose match forbids execution outright
            classification_rules: Ordered tier rules, first match wins
            default: Result for commands matching no rule
        """
        self.blocking_rules = tuple(blocking_rules)
        self.classification_rules = tuple(classification_rules)
        self.default = default

    def match_blocking_rule(self, command: str) -> CommandRule | None:
        """Return the first blocking rule matching ``command``, if any."""
        for rule in self.blocking_rules:
            if rule.matches(command):
                return rule
        return None

    def is_blocked(self, command: str) -> bool:
        """Check whether ``command`` is hard-blocked.

        Cheaper than :meth:`classify` when the caller only needs to refuse
        early.
        """
        return self.match_blocking_rule(command) is not None

    def classify(self, command: str) -> Classification:
        """Classify a command string.

        Args:
            command: The literal command as it will be passed to the shell

        Returns:
            Classification from the first matching blocking rule, else the
            first matching classification rule, else the default.
        """
        blocking = self.match_blocking_rule(command)
        if blocking is not None:
            return blocking.outcome

        for rule in self.classification_rules:
            if rule.matches(command):
                return rule.outcome

        return self.default
