# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import argparse
import asyncio
import importlib.metadata as metadata
import json
import logging
import sys

from .config import Config
from .host import load_document
from .patterns import default_registry
from .query.dom import select_one
from .report import (
    ERROR_SCHEMA,
    fails_threshold,
    format_result,
    json_dumps,
    result_payload,
)
from .session import ScanSession
from .types import Confidence

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_SCAN_FAILED = 2
EXIT_CLI_ERROR = 3


def _get_version():
    """Return installed apgscan version, with a dev fallback."""
    try:
        return metadata.version("apgscan")
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


def _configure_logging(level_name):
    logging.basicConfig(
        level=LOG_LEVELS.get(level_name, logging.INFO),
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_app_config(args):
    """Load apgscan.toml and resolve analyzer options (flags win over the file)."""
    app_config = Config.load(args.config)
    app_config.apply_standards()
    args.analyzer_config = app_config.analyzer_config(
        enabled_types=getattr(args, "pattern", None),
        min_confidence=getattr(args, "min_confidence", None),
        include_suggestions=False if getattr(args, "no_suggestions", False) else None,
    )
    return app_config


def cmd_scan(args, app_config):
    """CLI handler for `apgscan scan`."""
    document = load_document(args.target)
    target = None
    if args.selector:
        target = select_one(document, args.selector)
        if target is None:
            raise LookupError(f"Element not found: {args.selector}")

    session = ScanSession(min_duration=0)
    outcome = asyncio.run(session.scan(document, args.analyzer_config, target=target))

    if not outcome.ok:
        reason = getattr(outcome, "reason", "scan did not complete")
        if args.json:
            err = {
                "schema": ERROR_SCHEMA,
                "ok": False,
                "code": "SCAN_FAILED",
                "message": reason,
                "source": args.target,
            }
            sys.stdout.write(json_dumps(err) + "\n")
        else:
            sys.stderr.write(f"[error] scan failed: {reason}\n")
        return EXIT_SCAN_FAILED

    result = outcome.result
    failed = fails_threshold(result.summary, args.fail_on)
    if args.json:
        sys.stdout.write(json_dumps(result_payload(result, source=args.target, ok=not failed)) + "\n")
    else:
        sys.stdout.write(format_result(result, source=args.target) + "\n")
    return EXIT_FINDINGS if failed else EXIT_OK


def cmd_rules(args, app_config):
    """CLI handler for `apgscan rules`: print each pattern type's rule table."""
    registry = default_registry()
    selected = args.pattern or registry.types()
    tables = {}
    for type_name in selected:
        validator = registry.get(type_name).validator
        tables[type_name] = [rule.to_dict() for rule in getattr(validator, "rules", ())]

    if args.json:
        sys.stdout.write(json_dumps({"schema": "apgscan.rules.v1", "ok": True, "rules": tables}) + "\n")
        return EXIT_OK
    for type_name, rules in tables.items():
        sys.stdout.write(f"{type_name}\n")
        for rule in rules:
            sys.stdout.write(f"  {rule['id']:<26} {rule['severity']:<8} {rule['description']}\n")
    return EXIT_OK


def cmd_patterns(args, app_config):
    """CLI handler for `apgscan patterns`."""
    types = default_registry().types()
    if args.json:
        sys.stdout.write(json_dumps({"schema": "apgscan.patterns.v1", "ok": True, "patterns": types}) + "\n")
    else:
        sys.stdout.write("\n".join(types) + "\n")
    return EXIT_OK


def cmd_watch(args, app_config):
    from .watcher import cmd_watch as _watch

    _watch(args, app_config)
    return EXIT_OK


def _add_analyzer_flags(p):
    p.add_argument("--pattern", "-p", action="append",
                   help="Pattern type to check (repeatable; default: all)")
    p.add_argument("--min-confidence", choices=[c.label for c in Confidence],
                   help="Drop matches below this confidence (default: low)")
    p.add_argument("--no-suggestions", action="store_true",
                   help="Omit fix suggestions from issues")
    p.add_argument("--json", action="store_true")


def _build_parser():
    """Construct and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="apgscan",
        description="Check interactive UI patterns in HTML against the ARIA Authoring Practices.",
    )
    parser.add_argument("--config", help="Path to apgscan.toml or pyproject.toml")
    parser.add_argument("--log-level", choices=list(LOG_LEVELS), default="warn")
    parser.add_argument("--version", action="version", version="apgscan " + _get_version())
    parser.add_argument("--json", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p_scan = sub.add_parser("scan", help="Scan an HTML file, URL, or - for stdin")
    p_scan.add_argument("target", help="HTML file path, http(s) URL, or -")
    p_scan.add_argument("--selector", help="Only report patterns inside the first element matching this CSS selector")
    p_scan.add_argument("--fail-on", choices=["error", "warning", "never"], default="error",
                        help="Exit with status 1 when issues at this level are found (default: error)")
    _add_analyzer_flags(p_scan)
    p_scan.set_defaults(func=cmd_scan)

    p_rules = sub.add_parser("rules", help="List validation rules per pattern type")
    p_rules.add_argument("--pattern", "-p", action="append")
    p_rules.add_argument("--json", action="store_true")
    p_rules.set_defaults(func=cmd_rules)

    p_patterns = sub.add_parser("patterns", help="List registered pattern types")
    p_patterns.add_argument("--json", action="store_true")
    p_patterns.set_defaults(func=cmd_patterns)

    p_watch = sub.add_parser("watch", help="Re-scan HTML files when they change")
    p_watch.add_argument("path", nargs="?", help="Directory to watch (default: config root)")
    p_watch.add_argument("--glob", action="append", help="File name pattern (repeatable; default: *.html, *.htm)")
    _add_analyzer_flags(p_watch)
    p_watch.set_defaults(func=cmd_watch)

    return parser


def main(argv=None):
    """Execute CLI command dispatch and standardized error handling."""
    argv = list(sys.argv[1:] if argv is None else argv)
    force_json = "--json" in argv
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # --help and --version exit 0; usage errors have already printed to stderr
        if not exc.code:
            return EXIT_OK
        if force_json:
            err = {
                "schema": ERROR_SCHEMA,
                "ok": False,
                "code": "CLI_ERROR",
                "message": "invalid command line arguments",
            }
            sys.stdout.write(json.dumps(err, ensure_ascii=True) + "\n")
        return EXIT_CLI_ERROR
    if force_json:
        args.json = True
    _configure_logging(args.log_level)
    try:
        app_config = _load_app_config(args)
        return args.func(args, app_config)
    except Exception as exc:
        if args.json:
            err = {
                "schema": ERROR_SCHEMA,
                "ok": False,
                "code": "CLI_ERROR",
                "message": str(exc),
            }
            sys.stdout.write(json.dumps(err, ensure_ascii=True) + "\n")
        else:
            sys.stderr.write(f"[error] {exc}\n")
        return EXIT_CLI_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
