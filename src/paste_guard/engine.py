"""Detection engine — the main API.  Rules first, then a generic fallback.

Usage:
    from paste_guard import Detector, DEFAULT_RULES, apply_redactions

    detector = Detector()        # reusable, holds no per-scan state

    text = "mail john@acme.com, key sk_live_51Hxxxxxxxx"
    findings = detector.scan(text, DEFAULT_RULES)
    for f in findings:
        print(f.rule_name, f.matched_text, "->", f.replacement_text)

    # Keep the second finding as-is, redact the rest
    print(apply_redactions(text, findings, [True, False]))

Every finding's replacement has the same shape as the original (letters ->
"A", digits -> "0", punctuation kept) unless its rule carries a static
replacement.  Findings never overlap; substitution is driven by offsets only.
"""

from __future__ import annotations
import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .types import Finding, RedactedText, RuleSet

logger = logging.getLogger(__name__)

# Word-like run: letters, digits and the punctuation common in keys/tokens
_TOKEN = re.compile(r"""[A-Za-z0-9!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?]+""")
_HAS_DIGIT = re.compile(r"[0-9]")
_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_SYMBOL = re.compile(r"[^A-Za-z0-9]")


@dataclass
class DetectorConfig:
    """Configuration for the Detector."""
    min_token_length: int = 8         # fallback ignores shorter tokens
    fallback_name: str = "Potential Sensitive ID"
    use_fallback: bool = True         # enable stage 2
    digit_placeholder: str = "0"
    letter_placeholder: str = "A"
    # Rule names to never apply
    skip_rules: set[str] = field(default_factory=set)
    # Allow-list: values that should NEVER be reported
    allow_list: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.min_token_length < 1:
            raise ValueError("min_token_length must be at least 1")
        for name in ("digit_placeholder", "letter_placeholder"):
            if len(getattr(self, name)) != 1:
                raise ValueError(f"{name} must be a single character")


def structural_redact(value: str, digit: str = "0", letter: str = "A") -> str:
    """Mask digits and letters, keep everything else.  Length is preserved."""
    return "".join(
        digit if ch.isdecimal() else letter if ch.isalpha() else ch
        for ch in value
    )


class ClaimedSpans:
    """Disjoint ``[start, end)`` ranges already taken by a finding."""

    __slots__ = ("_starts", "_ends")

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._ends: list[int] = []

    def is_free(self, start: int, end: int) -> bool:
        i = bisect_right(self._starts, start)
        if i > 0 and self._ends[i - 1] > start:
            return False
        if i < len(self._starts) and self._starts[i] < end:
            return False
        return True

    def claim(self, start: int, end: int) -> None:
        if not self.is_free(start, end):
            raise ValueError(f"span [{start}, {end}) overlaps a claimed span")
        i = bisect_right(self._starts, start)
        self._starts.insert(i, start)
        self._ends.insert(i, end)

    def __len__(self) -> int:
        return len(self._starts)


class Detector:
    """Two-stage sensitive data detector.

    Stage 1: rules, in rule set order.  Earlier rules win overlaps.
    Stage 2: generic fallback for long mixed tokens nobody claimed.
    """

    def __init__(self, config: DetectorConfig | None = None) -> None:
        self.config = config or DetectorConfig()

    def scan(self, text: str, rules: RuleSet | None = None) -> list[Finding]:
        """Find sensitive substrings.  ``rules=None`` means no rules loaded."""
        claimed = ClaimedSpans()
        findings = self._scan_rules(text, rules or RuleSet.empty(), claimed)
        if self.config.use_fallback:
            findings.extend(self._scan_fallback(text, claimed))
        return findings

    def redact(self, text: str, rules: RuleSet | None = None) -> RedactedText:
        """Scan and apply every finding."""
        findings = self.scan(text, rules)
        return RedactedText(text=apply_redactions(text, findings), findings=findings)

    def shape(self, value: str) -> str:
        return structural_redact(
            value,
            digit=self.config.digit_placeholder,
            letter=self.config.letter_placeholder,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _scan_rules(self, text: str, rules: RuleSet, claimed: ClaimedSpans) -> list[Finding]:
        findings: list[Finding] = []
        for rule in rules:
            if rule.name in self.config.skip_rules:
                continue
            try:
                regex = re.compile(rule.pattern, re.IGNORECASE)
            except re.error as e:
                logger.warning("skipping rule %r: invalid pattern (%s)", rule.name, e)
                continue

            for m in regex.finditer(text):
                start, end = m.span()
                if start == end or not claimed.is_free(start, end):
                    continue
                claimed.claim(start, end)
                value = m.group()
                if value in self.config.allow_list:
                    continue
                if rule.static_replacement is not None:
                    replacement = rule.static_replacement
                else:
                    replacement = self.shape(value)
                findings.append(Finding(
                    rule_name=rule.name,
                    matched_text=value,
                    replacement_text=replacement,
                    start=start,
                    length=end - start,
                ))
        return findings

    def _scan_fallback(self, text: str, claimed: ClaimedSpans) -> list[Finding]:
        findings: list[Finding] = []
        for m in _TOKEN.finditer(text):
            start, end = m.span()
            if end - start < self.config.min_token_length:
                continue
            if not claimed.is_free(start, end):
                continue
            token = m.group()
            if not _looks_sensitive(token):
                continue
            claimed.claim(start, end)
            if token in self.config.allow_list:
                continue
            findings.append(Finding(
                rule_name=self.config.fallback_name,
                matched_text=token,
                replacement_text=self.shape(token),
                start=start,
                length=end - start,
            ))
        return findings


def _looks_sensitive(token: str) -> bool:
    """Digits mixed with letters or with punctuation."""
    if not _HAS_DIGIT.search(token):
        return False
    return bool(_HAS_LETTER.search(token) or _HAS_SYMBOL.search(token))


def apply_redactions(
    text: str,
    findings: Iterable[Finding],
    selected: Sequence[bool] | None = None,
) -> str:
    """Overwrite each selected finding's span with its replacement.

    ``selected`` runs parallel to ``findings`` (default: all on).  Works on
    recorded offsets only, never by searching for the matched value, so
    duplicate values elsewhere in the text are left alone.
    """
    findings = list(findings)
    if selected is None:
        flags = [True] * len(findings)
    else:
        flags = list(selected)
        if len(flags) != len(findings):
            raise ValueError(
                f"selection has {len(flags)} entries for {len(findings)} findings"
            )

    chosen = sorted((f for f, on in zip(findings, flags) if on), key=lambda f: f.start)
    parts: list[str] = []
    pos = 0
    for f in chosen:
        if f.start < pos:
            raise ValueError(f"finding at {f.start} overlaps the previous one")
        if text[f.start:f.end] != f.matched_text:
            raise ValueError(f"finding at {f.start} does not match the text")
        parts.append(text[pos:f.start])
        parts.append(f.replacement_text)
        pos = f.end
    parts.append(text[pos:])
    return "".join(parts)
