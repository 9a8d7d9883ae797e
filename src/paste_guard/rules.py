"""Rule source loader.

Rule files are JSON or YAML.  Either a bare list or a mapping with a
``rules`` key:

    rules:
      - name: Email Address
        pattern: '\\b[\\w.+-]+@[\\w-]+\\.[\\w.]+\\b'
      - name: Internal Ticket
        regex: 'TICKET-\\d{6}'
        replacement: 'TICKET-XXXXXX'

Patterns are not compiled here — a bad pattern is the engine's problem and
only costs that one rule.  A missing or unparsable file yields an empty
rule set so the fallback scan still protects the user.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .types import Rule, RuleSet

logger = logging.getLogger(__name__)


def parse_rules(data: Any) -> RuleSet:
    """Build a RuleSet from decoded rule records, keeping their order."""
    if isinstance(data, dict):
        data = data.get("rules", [])
    if not isinstance(data, list):
        logger.warning("rule source is not a list (got %s); using no rules",
                       type(data).__name__)
        return RuleSet.empty()

    rules: list[Rule] = []
    for idx, record in enumerate(data):
        if not isinstance(record, dict):
            logger.warning("skipping rule #%d: not a mapping", idx)
            continue
        name = record.get("name")
        pattern = record.get("pattern", record.get("regex"))
        if not isinstance(name, str) or not name:
            logger.warning("skipping rule #%d: missing name", idx)
            continue
        if not isinstance(pattern, str) or not pattern:
            logger.warning("skipping rule %r: missing pattern", name)
            continue
        replacement = record.get("replacement", record.get("staticReplacement"))
        if replacement is not None and not isinstance(replacement, str):
            logger.warning("rule %r: ignoring non-string replacement", name)
            replacement = None
        rules.append(Rule(name=name, pattern=pattern, static_replacement=replacement))
    return RuleSet(tuple(rules))


def load_rules(path: str | Path) -> RuleSet:
    """Load a rule file (``.json`` as JSON, anything else as YAML)."""
    path = Path(path).expanduser()
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("cannot read rule file %s: %s; using no rules", path, e)
        return RuleSet.empty()

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (ValueError, yaml.YAMLError) as e:
        logger.warning("cannot parse rule file %s: %s; using no rules", path, e)
        return RuleSet.empty()

    rules = parse_rules(data)
    logger.info("loaded %d rules from %s", len(rules), path)
    return rules
