"""Tests for JSON/table output formatting."""

import json
import sys
from pathlib import Path

import pytest

import main as cli_main
from clientscan.engine import scan


def test_json_formatting_keeps_evidence_unescaped(tmp_path: Path) -> None:
    """Verify JSON formatting preserves literal markup in evidence."""
    (tmp_path / "admin.html").write_text(
        '<a href="/admin/delete?id=1&confirm=1" hidden>Delete</a>',
        encoding="utf-8",
    )

    result = scan(str(tmp_path))
    rendered = cli_main.format_json_output(result)
    payload = json.loads(rendered)

    assert payload["summary"]["findings_count"] == 1
    assert payload["findings"][0]["evidence"] == '<a href="/admin/delete?id=1&confirm=1" hidden>'
    assert "&amp;" not in rendered


def test_table_output_prints_columns_and_severity_counts(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Verify table output includes headers, counts, and shortened evidence."""
    (tmp_path / "page.html").write_text(
        '<input type="password" value="hunter22" '
        'class="form-control form-control-lg login-password-field">',
        encoding="utf-8",
    )

    monkeypatch.setattr(
        sys,
        "argv",
        ["main.py", "--path", str(tmp_path), "--format", "table"],
    )
    exit_code = cli_main.main()
    captured = capsys.readouterr()

    assert exit_code == 2
    for header in ("SEVERITY", "CONFIDENCE", "TYPE", "URL", "EVIDENCE"):
        assert header in captured.out
    assert "Findings: 1 (High: 1, Medium: 0, Low: 0, Info: 0)" in captured.out
    assert "PasswordValueInDom" in captured.out
    assert "…" in captured.out


def test_table_output_handles_empty_result() -> None:
    """Verify an empty payload still renders the summary and header row."""
    rendered = cli_main.format_table_output({"summary": {}, "findings": []})

    assert "Scanned files: 0" in rendered
    assert rendered.splitlines()[-1].startswith("SEVERITY")
