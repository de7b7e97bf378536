from __future__ import annotations

import asyncio
import json
from pathlib import Path

from apgscan.config import Config
from apgscan.host import load_file
from apgscan.report import format_result, result_payload

ROOT = Path(__file__).resolve().parent
OUTPUT_DIR = ROOT / "output"
PAGE_PATH = ROOT / "gallery.html"
REPORT_PATH = OUTPUT_DIR / "gallery_report.json"


def _states(busy: bool) -> None:
    print("[scan] busy" if busy else "[scan] idle")


async def scan_gallery():
    config = Config.load(ROOT / "apgscan.toml")
    config.apply_standards()
    session = config.build_session(on_state_change=_states)
    document = load_file(PAGE_PATH)

    full = await session.run(document)
    app_only = await session.run_within(document, document.select_one("#app"))
    return full, app_only


def main() -> None:
    full, app_only = asyncio.run(scan_gallery())
    print(format_result(full, source=PAGE_PATH.name))
    print(f"[scoped] #app holds {app_only.summary.patterns_found} of {full.summary.patterns_found} dialogs")

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    payload = result_payload(full, source=PAGE_PATH.name, ok=full.summary.errors == 0)
    REPORT_PATH.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    print(f"[ok] wrote {REPORT_PATH}")


if __name__ == "__main__":
    main()
