# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import asyncio
import fnmatch
import logging
import sys
import time
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .host import load_file
from .report import format_result, json_dumps, result_payload
from .session import ScanSession

logger = logging.getLogger(__name__)


class ScanEventHandler(FileSystemEventHandler):
    def __init__(self, scan_file, patterns, delay=0.5):
        self.scan_file = scan_file
        self.patterns = list(patterns)
        self.delay = delay
        self.last_scan = {}

    def wants(self, path):
        name = Path(path).name
        if name.startswith("."):
            return False
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.patterns)

    def _handle(self, event):
        if event.is_directory or not self.wants(event.src_path):
            return

        # Debounce per file; editors often write twice
        now = time.monotonic()
        if now - self.last_scan.get(event.src_path, float("-inf")) < self.delay:
            return
        self.last_scan[event.src_path] = now

        logger.info("Change detected in %s", event.src_path)
        try:
            self.scan_file(Path(event.src_path))
        except Exception as e:
            logger.error("Scan of %s failed: %s", event.src_path, e)

    def on_modified(self, event):
        self._handle(event)

    def on_created(self, event):
        self._handle(event)


def make_file_scanner(session, config, as_json=False, out=None):
    """Return a callable that scans one file through `session` and prints the report."""
    out = out or sys.stdout

    def scan_file(path):
        outcome = asyncio.run(session.scan(load_file(path), config))
        if not outcome.ok:
            logger.warning("Skipped %s: %s", path, getattr(outcome, "reason", "unknown"))
            return outcome
        if as_json:
            out.write(json_dumps(result_payload(outcome.result, source=path)) + "\n")
        else:
            out.write(format_result(outcome.result, source=path) + "\n")
        return outcome

    return scan_file


def cmd_watch(args, app_config):
    """Watch a directory and re-scan HTML files when they change."""
    path = Path(args.path) if args.path else app_config.root
    patterns = args.glob or app_config.watch_patterns()
    session = ScanSession(min_duration=0)
    scan_file = make_file_scanner(session, args.analyzer_config, as_json=args.json)

    logger.info("Watching %s for changes (%s)", path, ", ".join(patterns))
    handler = ScanEventHandler(scan_file, patterns, delay=app_config.debounce())

    # Initial scan
    for candidate in sorted(path.rglob("*")):
        if not (candidate.is_file() and handler.wants(candidate)):
            continue
        try:
            scan_file(candidate)
        except Exception as e:
            logger.error("Initial scan of %s failed: %s", candidate, e)

    observer = Observer()
    observer.schedule(handler, str(path), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        observer.stop()
    observer.join()
