from __future__ import annotations

import io
from types import SimpleNamespace

import pytest

from apgscan import runtime
from apgscan.host import load_document, parse_html, resolve_root
from apgscan.session import ScanSession
from apgscan.types import AnalyzerConfig
from apgscan.watcher import ScanEventHandler, make_file_scanner

GOOD = '<div role="dialog" aria-label="Ok" hidden><button>Close</button></div>'
BAD = '<div class="overlay"></div><div id="d" role="dialog"></div>'


def test_counts_and_has_errors_on_markup() -> None:
    assert not runtime.has_errors(GOOD)
    assert runtime.issue_count(GOOD) == 0
    # accessible-name, dismiss-control-present and focusable-content are errors;
    # initially-hidden and modal-flag-consistency are warnings.
    assert runtime.error_count(BAD) == 3
    assert runtime.warning_count(BAD) == 2
    assert runtime.issue_count(BAD) == 5
    assert runtime.has_errors(BAD)


def test_analyze_html_accepts_mapping_config() -> None:
    result = runtime.analyze_html(BAD, config={"includeSuggestions": False})
    assert all(i.suggestion is None for m in result.patterns for i in m.issues)
    same = runtime.analyze_html(BAD, config=AnalyzerConfig(include_suggestions=False))
    assert same.to_dict() == result.to_dict()


def test_analyze_document_with_selector() -> None:
    doc = parse_html(f"<section id='a'>{GOOD}</section><section id='b'>{BAD}</section>")
    assert runtime.analyze_document(doc, selector="#a").summary.errors == 0
    assert runtime.analyze_document(doc, selector="#b").summary.errors == 3
    with pytest.raises(LookupError):
        runtime.analyze_document(doc, selector="#c")


def test_analyze_file(tmp_path) -> None:
    page = tmp_path / "page.html"
    page.write_text(BAD, encoding="utf-8")
    assert runtime.analyze_file(page).summary.patterns_found == 1


def test_resolve_root_and_load_document(tmp_path) -> None:
    doc = parse_html(GOOD)
    assert resolve_root(doc) is doc
    assert resolve_root(b"<p>x</p>").p is not None
    with pytest.raises(TypeError):
        resolve_root(42)
    with pytest.raises(FileNotFoundError):
        load_document(tmp_path / "missing.html")


def test_load_document_reads_stdin(monkeypatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(GOOD))
    assert load_document("-").select_one('[role="dialog"]') is not None


def test_watch_handler_filters_and_debounces(tmp_path) -> None:
    scanned = []
    handler = ScanEventHandler(scanned.append, ["*.html"], delay=60)
    page = str(tmp_path / "index.html")

    handler.on_modified(SimpleNamespace(is_directory=False, src_path=page))
    handler.on_modified(SimpleNamespace(is_directory=False, src_path=page))
    handler.on_created(SimpleNamespace(is_directory=False, src_path=str(tmp_path / "style.css")))
    handler.on_created(SimpleNamespace(is_directory=False, src_path=str(tmp_path / ".index.html")))
    handler.on_created(SimpleNamespace(is_directory=True, src_path=str(tmp_path / "dir.html")))

    assert [str(p) for p in scanned] == [page]


def test_watch_handler_logs_scan_failures(tmp_path, caplog) -> None:
    def explode(path):
        raise OSError("gone")

    handler = ScanEventHandler(explode, ["*.html"], delay=0)
    handler.on_modified(SimpleNamespace(is_directory=False, src_path=str(tmp_path / "a.html")))
    assert "gone" in caplog.text


def test_file_scanner_writes_report(tmp_path) -> None:
    page = tmp_path / "page.html"
    page.write_text(BAD, encoding="utf-8")
    out = io.StringIO()
    scan_file = make_file_scanner(ScanSession(min_duration=0), AnalyzerConfig(), as_json=True, out=out)
    outcome = scan_file(page)
    assert outcome.ok
    assert '"schema": "apgscan.result.v1"' in out.getvalue()
    assert '"errors": 3' in out.getvalue()
