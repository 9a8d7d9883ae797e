"""paste-guard — detect and redact sensitive data before it is pasted."""

from .engine import Detector, DetectorConfig, apply_redactions, structural_redact
from .domains import DomainPolicy, is_covered, should_scan
from .guard import PasteGuard
from .session import ScanSession, SessionFinalizedError
from .config import GuardSettings, create_guard, load_config, load_from_yaml
from .rules import load_rules, parse_rules
from .patterns import DEFAULT_RULES
from .types import Decision, Finding, RedactedText, Rule, RuleSet

__all__ = [
    "Detector", "DetectorConfig", "apply_redactions", "structural_redact",
    "DomainPolicy", "is_covered", "should_scan",
    "PasteGuard",
    "ScanSession", "SessionFinalizedError",
    "GuardSettings", "create_guard", "load_config", "load_from_yaml",
    "load_rules", "parse_rules", "DEFAULT_RULES",
    "Decision", "Finding", "RedactedText", "Rule", "RuleSet",
]
__version__ = "0.1.0"
