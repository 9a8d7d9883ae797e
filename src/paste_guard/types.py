"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator

ACTIONS = ("pasteOriginal", "pasteModified", "cancel")


@dataclass(frozen=True, slots=True)
class Rule:
    """A named detection pattern."""
    name: str
    pattern: str                            # regex source, compiled per scan
    static_replacement: str | None = None   # None = structural redaction


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Ordered, immutable collection of rules.  Order is priority."""
    rules: tuple[Rule, ...] = ()

    @classmethod
    def empty(cls) -> "RuleSet":
        return cls(())

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def names(self) -> list[str]:
        return [r.name for r in self.rules]


@dataclass(frozen=True, slots=True)
class Finding:
    """A single detected occurrence in the scanned text."""
    rule_name: str
    matched_text: str
    replacement_text: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def to_dict(self) -> dict:
        return {
            "rule": self.rule_name,
            "text": self.matched_text,
            "replacement": self.replacement_text,
            "start": self.start,
            "length": self.length,
        }


@dataclass(slots=True)
class RedactedText:
    """Result of scanning and redacting in one pass."""
    text: str                                   # text with every finding applied
    findings: list[Finding] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Decision:
    """The user's final choice for a scan session."""
    action: str            # "pasteOriginal" | "pasteModified" | "cancel"
    text: str | None = None

    def to_dict(self) -> dict:
        out: dict = {"action": self.action}
        if self.text is not None:
            out["text"] = self.text
        return out
