"""Bundled rule set — used when no external rule file is configured.

Order is priority: specific credential formats come first so a Stripe key
is reported as a Stripe key rather than as a generic ``key=value`` secret.
Every pattern is matched case-insensitively by the engine.
"""

from __future__ import annotations

from .types import Rule, RuleSet

DEFAULT_RULES = RuleSet((
    # Private keys — just the armour header, the body is caught by nothing else
    Rule("Private Key", r"-----BEGIN [A-Z ]*PRIVATE KEY-----"),

    # JSON Web Token
    Rule("JWT", r"eyJ[a-zA-Z0-9_-]{10,}\.[a-zA-Z0-9_-]{10,}\.[a-zA-Z0-9_-]{10,}"),

    # Cloud / SaaS credentials
    Rule("AWS Access Key", r"\b(?:AKIA|ASIA)[A-Z0-9]{16}\b"),
    Rule("GitHub Token", r"\b(?:gh[pousr]_[a-zA-Z0-9]{36}|github_pat_[a-zA-Z0-9_]{22,})\b"),
    Rule("Slack Token", r"\bxox[baprs]-[a-zA-Z0-9-]{10,}"),
    Rule("Google API Key", r"\bAIza[a-zA-Z0-9_-]{35}"),
    Rule("Stripe Key", r"\b(?:sk|pk|rk)_(?:live|test)_[a-zA-Z0-9]{24,}"),
    Rule("OpenAI API Key", r"\bsk-(?:proj-)?[a-zA-Z0-9_-]{20,}"),

    # URLs with auth tokens / API keys in query params
    Rule("URL With Secret",
         r"https?://[^\s]+[?&](?:api_key|token|secret|password|key)=[^\s&]+"),

    # Generic key=value secrets
    Rule("Secret Assignment",
         r"(?:api[_\-]?key|secret|token|password|passwd|bearer)\s*[:=]\s*['\"]?"
         r"[a-zA-Z0-9\-_\.]{12,}['\"]?"),

    # Structured PII
    Rule("Email Address", r"\b[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}\b"),
    Rule("Credit Card",
         r"\b(?:4\d{3}|5[1-5]\d{2}|3[47]\d{2}|6(?:011|5\d{2}))"
         r"[\s\-.]?\d{4}[\s\-.]?\d{4}[\s\-.]?\d{1,4}\b"),
    Rule("US SSN", r"\b\d{3}[\s\-]\d{2}[\s\-]\d{4}\b"),
    Rule("IPv4 Address",
         r"\b(?:(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\.){3}"
         r"(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\b"),
    Rule("Phone Number",
         r"(?<!\d)(?:\+\d{1,3}[\s\-.]?)?\(?\d{3}\)?[\s\-.]\d{3}[\s\-.]\d{4}(?!\d)"),
))
