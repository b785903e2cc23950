"""Tests for the analyze() entry point and its end-to-end guarantees."""

from time import perf_counter

import pytest

from clientscan import engine
from clientscan.engine import analyze
from clientscan.limits import AnalyzerLimits
from models import Finding

URL = "https://app.example.test/admin/users"


@pytest.mark.parametrize("html", ["", "   \n\t  ", None])
def test_blank_html_returns_no_findings(html: str | None) -> None:
    """Verify empty or whitespace-only bodies are not errors."""
    assert analyze(URL, html) == []


def test_password_scenario_yields_single_high_finding() -> None:
    """Verify an unquoted password value produces exactly one finding."""
    findings = analyze(URL, "<input type=password value=secret123>")

    assert len(findings) == 1
    assert findings[0].type == "PasswordValueInDom"
    assert findings[0].severity == "High"
    assert findings[0].confidence == 95
    assert "<input type=password value=secret123>" in findings[0].evidence


def test_attribute_order_does_not_change_password_finding() -> None:
    """Verify value-before-type and type-before-value are equivalent."""
    first = analyze(URL, '<input value="x" type="password">')
    second = analyze(URL, '<input type="password" value="x">')

    assert [(f.type, f.severity, f.confidence) for f in first] == [
        ("PasswordValueInDom", "High", 95)
    ]
    assert [(f.type, f.severity, f.confidence) for f in first] == [
        (f.type, f.severity, f.confidence) for f in second
    ]


def test_disabled_delete_button_scenario() -> None:
    """Verify the disabled delete button is the only, actionable finding."""
    findings = analyze(
        URL,
        '<button id="btnDeleteUser" disabled onclick="deleteUser()">Delete</button>',
    )

    assert [f.type for f in findings] == ["HiddenOrDisabledControl"]
    assert findings[0].severity in {"High", "Medium"}
    assert "looks actionable" in findings[0].summary


def test_screen_reader_only_span_yields_nothing() -> None:
    """Verify accessibility-only hiding produces no findings at all."""
    assert analyze(URL, '<span class="sr-only">Skip to content</span>') == []


def test_inline_api_key_scenario() -> None:
    """Verify an inline API key yields exactly one Low secret finding."""
    findings = analyze(
        URL,
        '<script>const apiKey="AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA";</script>',
    )

    assert [(f.type, f.severity) for f in findings] == [("InlineScriptSecretish", "Low")]


def test_repeated_analysis_produces_identical_stable_keys() -> None:
    """Verify stable keys are deterministic across calls."""
    html = (
        '<input type="password" value="hunter22">'
        '<a href="/admin/delete" hidden>Delete</a>'
        '<script>var token = "abcdefghijklmnopqrstuvwxyz012345";</script>'
    )

    first = analyze(URL, html)
    second = analyze(URL, html)

    assert len(first) == 3
    assert [f.stable_key for f in first] == [f.stable_key for f in second]
    assert first == second
    assert len({f.stable_key for f in first}) == len(first)


def test_findings_keep_detector_order() -> None:
    """Verify findings are concatenated in fixed detector order."""
    html = (
        "<script>if (isDevToolsOpen()) { debugger; }</script>"
        '<script>var secret = "abcdefghijklmnopqrstuvwxyz";</script>'
        '<div data-role="admin"></div>'
        '<button disabled type="submit">Save</button>'
        '<input type="password" value="pw-in-dom">'
    )

    types = [f.type for f in analyze(URL, html)]

    assert types == [
        "PasswordValueInDom",
        "HiddenOrDisabledControl",
        "RolePermissionHint",
        "InlineScriptSecretish",
        "DevtoolsBlocking",
    ]


def test_controls_and_role_hints_ignore_script_contents() -> None:
    """Verify markup inside scripts is not treated as controls or role hints."""
    html = (
        "<script>var tpl = '<button disabled onclick=\"x()\">'; "
        "const role = 'admin';</script><style>.x{display:none}</style>"
    )

    assert analyze(URL, html) == []


def test_password_detector_still_sees_script_contents() -> None:
    """Verify the password pass runs on the unstripped page text."""
    html = "<script>document.write('<input type=password value=topsecret>');</script>"

    assert [f.type for f in analyze(URL, html)] == ["PasswordValueInDom"]


@pytest.mark.parametrize(
    ("url", "expected_host"),
    [
        ("https://App.Example.test/a", "app.example.test"),
        ("::not a url::", ""),
        ("http://[broken", ""),
        (None, ""),
    ],
)
def test_host_is_derived_without_raising(url: str | None, expected_host: str) -> None:
    """Verify unparseable URLs resolve to an empty host."""
    findings = analyze(url, "<input type=password value=secret123>")

    assert findings[0].host == expected_host


def test_failing_detector_is_isolated(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify one detector error does not abort the remaining detectors."""

    def explode(html: str, url: str, host: str, limits: AnalyzerLimits) -> list[Finding]:
        raise RuntimeError("boom")

    monkeypatch.setattr(
        engine,
        "DETECTORS",
        (("explode", explode, False),) + engine.DETECTORS,
    )

    findings = analyze(URL, "<input type=password value=secret123>")

    assert [f.type for f in findings] == ["PasswordValueInDom"]


def test_match_limit_bounds_findings_per_detector() -> None:
    """Verify the per-detector match cap is honored."""
    html = "".join(f'<input type="password" value="secret{i:04d}">' for i in range(5))

    findings = analyze(URL, html, AnalyzerLimits(max_matches_per_detector=2))

    assert len(findings) == 2


def test_input_beyond_max_chars_is_ignored() -> None:
    """Verify text past the input bound is not analyzed."""
    html = "<p>" + "a" * 100 + '</p><input type="password" value="late-secret">'

    assert analyze(URL, html, AnalyzerLimits(max_input_chars=50)) == []


@pytest.mark.parametrize(
    "html",
    [
        "<a " * 5_000,
        "<script>" * 5_000,
        '<button x="' * 5_000,
        "token " + "A" * 50_000,
        "<script>" + "secret " * 5_000 + "</script>",
    ],
)
def test_pathological_markup_is_handled(html: str) -> None:
    """Verify adversarial markup completes and returns a list."""
    assert isinstance(analyze(URL, html), list)


@pytest.mark.parametrize(
    "html",
    [
        "<a " * 70_000,
        "<input " * 70_000,
        '<button x="' * 50_000,
        "<script " * 50_000,
    ],
)
def test_unclosed_tag_openers_scan_in_linear_time(html: str) -> None:
    """Verify repeated unclosed openers do not trigger quadratic rescans."""
    started_at = perf_counter()

    findings = analyze(URL, html)

    assert findings == []
    assert perf_counter() - started_at < 2.0


def test_finding_confidence_is_clamped_and_serializable() -> None:
    """Verify Finding clamps confidence and exposes a JSON-ready dict."""
    finding = Finding(
        type="RolePermissionHint",
        severity="Info",
        confidence=150,
        url=URL,
        host="app.example.test",
        title="t",
        summary="s",
        evidence="<div data-role=\"admin\">",
        recommendation="r",
    )

    payload = finding.to_dict()

    assert finding.confidence == 100
    assert payload["stable_key"] == finding.stable_key
    assert payload["evidence"] == '<div data-role="admin">'
    assert finding.stable_key.startswith(f"RolePermissionHint|{URL}|")
    assert len(finding.stable_key.rsplit("|", 1)[1]) == 16
    assert set(payload) == {
        "stable_key",
        "type",
        "severity",
        "confidence",
        "url",
        "host",
        "title",
        "summary",
        "evidence",
        "recommendation",
        "first_seen",
    }
