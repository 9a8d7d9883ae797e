"""Host-platform boundary — what the extension's background worker calls.

Usage:

    guard = PasteGuard(GuardSettings(domains=["chatgpt.com"]), rules=DEFAULT_RULES)

    # Message from a content script
    reply = guard.handle_message({"text": pasted}, page_url=tab_url)
    # {"findings": [...]}  -- empty means paste the original through

    # Or drive the whole interaction
    session = guard.open_session(pasted, tab_url)
    if session is None:
        insert(pasted)
    else:
        session.toggle(0, False)
        decision = session.decide("pasteModified")

Everything here fails open: on bad input, disabled protection, an
unresolvable page or an unexpected error the answer is "no findings", so a
paste is never blocked by the guard itself.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .domains import should_scan
from .engine import Detector, DetectorConfig
from .session import ScanSession
from .types import Finding, RuleSet

if TYPE_CHECKING:
    from .config import GuardSettings

logger = logging.getLogger(__name__)


@dataclass
class PasteGuard:
    """Gate + detector bound to one settings snapshot and rule set."""

    settings: GuardSettings
    rules: RuleSet | None = None   # None = rules not loaded yet
    detector: Detector = field(default_factory=Detector)

    @classmethod
    def create(cls, settings: GuardSettings, rules: RuleSet | None = None) -> "PasteGuard":
        """Factory — builds a detector configured from the settings."""
        detector = Detector(DetectorConfig(
            min_token_length=settings.min_token_length,
            skip_rules=set(settings.skip_rules),
            allow_list=set(settings.allow_list),
        ))
        return cls(settings=settings, rules=rules, detector=detector)

    def analyze(self, text: object, page_url: object) -> list[Finding]:
        """Scan text pasted/uploaded on ``page_url``; [] when not applicable."""
        if not isinstance(text, str) or not text:
            return []
        if len(text) > self.settings.max_input_chars:
            logger.info("input of %d chars exceeds limit of %d; not scanning",
                        len(text), self.settings.max_input_chars)
            return []
        if not self.settings.enabled:
            return []
        if not should_scan(page_url, self.settings.domains, self.settings.policy):
            logger.debug("page not in scan scope; skipping analysis")
            return []

        if self.rules is None:
            logger.warning("rule set not loaded; scanning with fallback only")
        findings = self.detector.scan(text, self.rules)
        logger.debug("found %d sensitive values", len(findings))
        return findings

    def handle_message(self, message: object, page_url: object) -> dict:
        """Answer a scan request ``{"text": ...}`` with ``{"findings": [...]}``."""
        try:
            text = None
            if isinstance(message, dict):
                text = message.get("text", message.get("data"))
            findings = self.analyze(text, page_url)
            return {"findings": [f.to_dict() for f in findings]}
        except Exception:
            logger.exception("analysis failed; letting the paste through")
            return {"findings": []}

    def open_session(self, text: object, page_url: object) -> ScanSession | None:
        """Start a redaction session, or None if there is nothing to redact."""
        findings = self.analyze(text, page_url)
        if not findings:
            return None
        return ScanSession(text, findings)
