"""CLI interface for paste-guard.

Usage:
    # Scan text (stdin) — prints findings as JSON
    echo 'key sk_live_51Hxxxxxxxx' | python -m paste_guard.cli scan

    # Scan as if pasted on a page (applies the domain gate and enable flag)
    python -m paste_guard.cli --url https://chatgpt.com/c/1 scan --file notes.txt

    # Print the redacted text, leaving finding #0 untouched
    echo 'mail a@b.co key sk_live_51Hxxxxxxxx' | python -m paste_guard.cli redact --keep 0

    # Domain gate decision / protected list management
    python -m paste_guard.cli check https://api.chatgpt.com/x
    python -m paste_guard.cli domains add example.com

Configuration is read from ``--config`` (YAML, see ``paste_guard.config``).
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import DEFAULT_CONFIG, GuardSettings, create_guard, load_from_yaml, save_to_yaml
from .domains import add_domain, page_hostname, remove_domain, should_scan, is_covered
from .engine import apply_redactions
from .files import read_text_file
from .guard import PasteGuard
from .types import Finding

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _load_settings(args: argparse.Namespace) -> GuardSettings:
    settings = load_from_yaml(args.config)
    if args.rules:
        settings.rules_path = args.rules
    if args.min_length is not None:
        settings.min_token_length = args.min_length
    return settings


def _read_input(args: argparse.Namespace) -> str:
    if args.file:
        return read_text_file(args.file, args.mime)
    return sys.stdin.read()


def _findings(guard: PasteGuard, text: str, url: str | None) -> list[Finding]:
    """Without a page URL the gate is bypassed; the size limit still applies."""
    if url is not None:
        return guard.analyze(text, url)
    if len(text) > guard.settings.max_input_chars:
        logger.warning("input exceeds %d chars; not scanning", guard.settings.max_input_chars)
        return []
    return guard.detector.scan(text, guard.rules)


def cmd_scan(args: argparse.Namespace) -> None:
    """Print findings for text on stdin (or --file)."""
    guard = create_guard(_load_settings(args))
    findings = _findings(guard, _read_input(args), args.url)
    json.dump({"findings": [f.to_dict() for f in findings]}, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_redact(args: argparse.Namespace) -> None:
    """Print the text with findings redacted (except --keep indices)."""
    guard = create_guard(_load_settings(args))
    text = _read_input(args)
    findings = _findings(guard, text, args.url)
    keep = set(args.keep or [])
    selected = [i not in keep for i in range(len(findings))]
    sys.stdout.write(apply_redactions(text, findings, selected))


def cmd_check(args: argparse.Namespace) -> None:
    """Report the domain gate decision for a URL."""
    settings = _load_settings(args)
    output = {
        "url": args.page_url,
        "hostname": page_hostname(args.page_url),
        "policy": settings.policy.value,
        "covered": is_covered(args.page_url, settings.domains),
        "scan": settings.enabled and should_scan(args.page_url, settings.domains, settings.policy),
    }
    json.dump(output, sys.stdout)
    sys.stdout.write("\n")


def cmd_domains(args: argparse.Namespace) -> None:
    """List, add or remove entries of the stored domain list."""
    settings = load_from_yaml(args.config)
    if args.action == "add":
        settings.domains = add_domain(settings.domains, args.domain)
        save_to_yaml(settings, args.config)
    elif args.action == "remove":
        settings.domains = remove_domain(settings.domains, args.domain)
        save_to_yaml(settings, args.config)
    json.dump(settings.domains, sys.stdout, indent=2)
    sys.stdout.write("\n")


def cmd_rules(args: argparse.Namespace) -> None:
    """List active rule names in priority order."""
    guard = create_guard(_load_settings(args))
    names = [n for n in guard.rules.names() if n not in guard.settings.skip_rules]
    json.dump(names, sys.stdout, indent=2)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="paste_guard",
        description="Detect and redact sensitive data in pasted text",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML settings path")
    parser.add_argument("--rules", default="", help="Rule file (JSON/YAML) to use instead of the bundled rules")
    parser.add_argument("--url", default=None, help="Page URL the text is pasted into")
    parser.add_argument("--min-length", type=_positive_int, default=None, help="Fallback minimum token length")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (("scan", "Print findings (JSON)"), ("redact", "Print redacted text")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--file", default=None, help="Read this file instead of stdin")
        p.add_argument("--mime", default="", help="MIME type of --file")
        if name == "redact":
            p.add_argument("--keep", type=int, nargs="*", help="Finding indices to leave as-is")

    p = sub.add_parser("check", help="Domain gate decision for a URL")
    p.add_argument("page_url")

    p = sub.add_parser("domains", help="Manage the stored domain list")
    p.add_argument("action", choices=["list", "add", "remove"])
    p.add_argument("domain", nargs="?", default="")

    sub.add_parser("rules", help="List active rules")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "domains" and args.action != "list" and not args.domain:
        parser.error(f"domains {args.action} needs a domain")

    cmds = {
        "scan": cmd_scan,
        "redact": cmd_redact,
        "check": cmd_check,
        "domains": cmd_domains,
        "rules": cmd_rules,
    }
    cmds[args.command](args)


if __name__ == "__main__":
    main()
