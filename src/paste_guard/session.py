"""ScanSession — one analyzed text blob and the user's redaction choices.

A session lives from the moment findings are shown until the user picks
paste original / paste redacted / cancel.  It owns its own toggle state and
shares nothing with other sessions.
"""

from __future__ import annotations
from typing import Iterable

from .engine import apply_redactions
from .types import ACTIONS, Decision, Finding


class SessionFinalizedError(RuntimeError):
    """Raised when a session is used after its decision was made."""


class ScanSession:
    """Original text, immutable findings and a per-finding "apply" flag."""

    __slots__ = ("_original", "_findings", "_enabled", "_decision")

    def __init__(self, original_text: str, findings: Iterable[Finding]) -> None:
        self._original = original_text
        self._findings: tuple[Finding, ...] = tuple(findings)
        self._enabled: list[bool] = [True] * len(self._findings)
        self._decision: Decision | None = None

    @property
    def original_text(self) -> str:
        return self._original

    @property
    def findings(self) -> tuple[Finding, ...]:
        return self._findings

    @property
    def flags(self) -> tuple[bool, ...]:
        return tuple(self._enabled)

    @property
    def decision(self) -> Decision | None:
        return self._decision

    @property
    def finalized(self) -> bool:
        return self._decision is not None

    def toggle(self, index: int, enabled: bool) -> None:
        """Turn redaction of one finding on or off."""
        self._check_open()
        if not 0 <= index < len(self._findings):
            raise IndexError(f"no finding #{index}")
        self._enabled[index] = bool(enabled)

    def enabled_findings(self) -> list[Finding]:
        return [f for f, on in zip(self._findings, self._enabled) if on]

    def redacted_text(self) -> str:
        return apply_redactions(self._original, self._findings, self._enabled)

    def decide(self, action: str) -> Decision:
        """Finalize the session with the user's action."""
        self._check_open()
        if action not in ACTIONS:
            raise ValueError(f"unknown action {action!r}")

        if action == "pasteOriginal":
            decision = Decision(action, self._original)
        elif action == "pasteModified":
            decision = Decision(action, self.redacted_text())
        else:
            decision = Decision(action)

        self._decision = decision
        return decision

    def _check_open(self) -> None:
        if self._decision is not None:
            raise SessionFinalizedError(
                f"session already finalized with {self._decision.action!r}"
            )

    def __len__(self) -> int:
        return len(self._findings)
