"""YAML/dict config loader for paste-guard.

Supports loading from a YAML file or a plain dict — including the raw
key/value blob the browser extension keeps in its local storage
(``dlpEnabled``, ``protectedDomains``, ``whitelistedDomains``).

Example YAML:

    paste_guard:
      enabled: true
      policy: protected        # "protected" (scan listed sites only) or "whitelist"
      domains:
        - chatgpt.com
        - claude.ai
      max_input_chars: 1000000
      min_token_length: 8
      rules_path: ~/.paste-guard/rules.yaml
      skip_rules:
        - Phone Number
      allow_list:
        - noreply@example.com

Broken configuration never blocks a paste: unreadable, non-UTF-8 or
malformed files fall back to defaults, and malformed lists are treated as empty.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .domains import DEFAULT_PROTECTED_DOMAINS, DomainPolicy
from .guard import PasteGuard
from .patterns import DEFAULT_RULES
from .rules import load_rules

logger = logging.getLogger(__name__)

DEFAULT_MAX_INPUT_CHARS = 1_000_000
DEFAULT_CONFIG = os.environ.get(
    "PASTE_GUARD_CONFIG",
    str(Path.home() / ".paste-guard" / "config.yaml"),
)

_STORAGE_KEYS = {
    DomainPolicy.PROTECTED: "protectedDomains",
    DomainPolicy.WHITELIST: "whitelistedDomains",
}


@dataclass
class GuardSettings:
    """Persisted guard configuration."""
    enabled: bool = True
    policy: DomainPolicy = DomainPolicy.PROTECTED
    domains: list[str] = field(default_factory=lambda: list(DEFAULT_PROTECTED_DOMAINS))
    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS
    min_token_length: int = 8
    rules_path: str | None = None      # None = bundled rules
    skip_rules: set[str] = field(default_factory=set)
    allow_list: set[str] = field(default_factory=set)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "enabled": self.enabled,
            "policy": self.policy.value,
            "domains": list(self.domains),
            "max_input_chars": self.max_input_chars,
            "min_token_length": self.min_token_length,
            "skip_rules": sorted(self.skip_rules),
            "allow_list": sorted(self.allow_list),
        }
        if self.rules_path:
            out["rules_path"] = self.rules_path
        return {"paste_guard": out}


def load_config(data: Any) -> GuardSettings:
    """Normalize a config dict (from YAML, inline, or extension storage)."""
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("config is not a mapping; using defaults")
        return GuardSettings()
    # Support nested under "paste_guard" key or flat
    if "paste_guard" in data:
        data = data["paste_guard"] or {}
        if not isinstance(data, dict):
            logger.warning("paste_guard section is not a mapping; using defaults")
            return GuardSettings()

    defaults = GuardSettings()
    try:
        policy = DomainPolicy.parse(data.get("policy", defaults.policy))
    except ValueError as e:
        logger.warning("%s; using %r", e, defaults.policy.value)
        policy = defaults.policy

    return GuardSettings(
        enabled=data.get("enabled", data.get("dlpEnabled", True)) is not False,
        policy=policy,
        domains=_domains(data, policy),
        max_input_chars=_positive_int(data, "max_input_chars", defaults.max_input_chars),
        min_token_length=_positive_int(data, "min_token_length", defaults.min_token_length),
        rules_path=_rules_path(data),
        skip_rules=_string_set(data, "skip_rules"),
        allow_list=_string_set(data, "allow_list"),
    )


def _rules_path(data: dict) -> str | None:
    value = data.get("rules_path")
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        logger.warning("invalid rules_path %r; using bundled rules", value)
        return None
    return value


def _string_set(data: dict, key: str) -> set[str]:
    raw = data.get(key)
    if raw is None:
        return set()
    if not isinstance(raw, list):
        logger.warning("%s is not a list; treating as empty", key)
        return set()
    return {v for v in raw if isinstance(v, str)}


def _domains(data: dict, policy: DomainPolicy) -> list[str]:
    raw = data.get("domains", data.get(_STORAGE_KEYS[policy]))
    if raw is None:
        # Fresh install: protected sites come from the bundled list
        if policy is DomainPolicy.PROTECTED:
            return list(DEFAULT_PROTECTED_DOMAINS)
        return []
    if not isinstance(raw, list):
        logger.warning("domain list is not a list; treating as empty")
        return []
    return [d for d in raw if isinstance(d, str) and d.strip()]


def _positive_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        logger.warning("invalid %s %r; using %d", key, value, default)
        return default
    return value


def load_from_yaml(path: str | Path) -> GuardSettings:
    """Load config from a YAML file.  Missing or broken files give defaults."""
    path = Path(path).expanduser()
    try:
        with open(path, encoding="utf-8") as f:
            return load_config(yaml.safe_load(f))
    except FileNotFoundError:
        logger.info("no config at %s; using defaults", path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("cannot load config %s: %s; using defaults", path, e)
    return GuardSettings()


def save_to_yaml(settings: GuardSettings, path: str | Path) -> None:
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(settings.to_dict(), f, sort_keys=False)


def create_guard(settings: GuardSettings) -> PasteGuard:
    """Create a fully configured guard from settings."""
    if settings.rules_path:
        rules = load_rules(settings.rules_path)
    else:
        rules = DEFAULT_RULES
    return PasteGuard.create(settings, rules)
