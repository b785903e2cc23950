"""Lenient markup helpers that work on raw page text.

There is no tag tree here. Tags are located with bounded regexes and
attributes are tokenized from the raw attribute text, so malformed HTML
degrades to missing attributes instead of errors.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from urllib.parse import urlsplit

MAX_TAG_CHARS = 8192
ELLIPSIS = "…"

ATTRIBUTE_RE = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'<>`]+)))?"""
)
WHITESPACE_RE = re.compile(r"\s+")
RAW_TEXT_OPEN_RE = re.compile(
    rf"<(script|style)\b[^<>]{{0,{MAX_TAG_CHARS}}}>",
    re.IGNORECASE,
)
RAW_TEXT_CLOSE_RE = {
    "script": re.compile(r"</script\b[^>]{0,256}>", re.IGNORECASE),
    "style": re.compile(r"</style\b[^>]{0,256}>", re.IGNORECASE),
}


def parse_attributes(attrs: str) -> dict[str, str | None]:
    """Tokenize raw attribute text into a name -> value mapping.

    Names are lowercased and the first occurrence wins. Bare (boolean)
    attributes map to ``None``. A value with an unterminated quote is
    treated as missing, so the attribute becomes bare.
    """
    parsed: dict[str, str | None] = {}
    if not attrs:
        return parsed

    for match in ATTRIBUTE_RE.finditer(attrs[:MAX_TAG_CHARS]):
        name = match.group(1).lower()
        if name in parsed:
            continue
        double_quoted, single_quoted, unquoted = match.group(2, 3, 4)
        if double_quoted is not None:
            parsed[name] = double_quoted
        elif single_quoted is not None:
            parsed[name] = single_quoted
        elif unquoted is not None:
            parsed[name] = unquoted
        else:
            parsed[name] = None
    return parsed


def extract_attribute(attrs: str, name: str) -> str:
    """Return the stripped value of ``name`` or an empty string."""
    value = parse_attributes(attrs).get(name.lower())
    return value.strip() if value else ""


def has_attribute(attrs: str, name: str, *, with_value: bool = False) -> bool:
    """Return True when ``name`` is present (optionally with an ``=value``)."""
    parsed = parse_attributes(attrs)
    key = name.lower()
    if key not in parsed:
        return False
    return parsed[key] is not None if with_value else True


def class_tokens(class_value: str | None) -> set[str]:
    """Split a class attribute value into lowercase tokens."""
    if not class_value:
        return set()
    return {token.lower() for token in class_value.split()}


def _iter_raw_text_elements(html: str) -> Iterator[tuple[str, int, int, int, int]]:
    """Yield ``(tag, start, body_start, body_end, end)`` for script/style elements.

    An element without a closing tag runs to the end of the text, which is
    how browsers treat an unterminated raw-text element.
    """
    position = 0
    while True:
        opening = RAW_TEXT_OPEN_RE.search(html, position)
        if opening is None:
            return
        tag = opening.group(1).lower()
        closing = RAW_TEXT_CLOSE_RE[tag].search(html, opening.end())
        if closing is None:
            yield tag, opening.start(), opening.end(), len(html), len(html)
            return
        yield tag, opening.start(), opening.end(), closing.start(), closing.end()
        position = closing.end()


def strip_scripts_and_styles(html: str) -> str:
    """Return ``html`` with every script and style element replaced by a space."""
    pieces: list[str] = []
    position = 0
    for _tag, start, _body_start, _body_end, end in _iter_raw_text_elements(html):
        pieces.append(html[position:start])
        pieces.append(" ")
        position = end
    pieces.append(html[position:])
    return "".join(pieces)


def iter_script_bodies(html: str, max_chars: int) -> Iterator[str]:
    """Yield non-blank inline script bodies, each cut to ``max_chars``."""
    for tag, _start, body_start, body_end, _end in _iter_raw_text_elements(html):
        if tag != "script":
            continue
        body = html[body_start:min(body_end, body_start + max_chars)]
        if body.strip():
            yield body


def shrink(text: str | None, max_chars: int) -> str:
    """Collapse whitespace and truncate to ``max_chars`` plus an ellipsis."""
    if not text:
        return ""
    collapsed = WHITESPACE_RE.sub(" ", text).strip()
    if len(collapsed) <= max_chars:
        return collapsed
    return collapsed[:max_chars] + ELLIPSIS


def context_window(text: str, start: int, end: int, radius: int = 60) -> str:
    """Return the slice around ``[start, end)`` widened by ``radius`` chars."""
    return text[max(0, start - radius):min(len(text), end + radius)]


def host_from_url(url: str | None) -> str:
    """Return the lowercase host of ``url`` or an empty string."""
    if not url or not isinstance(url, str):
        return ""
    try:
        hostname = urlsplit(url.strip()).hostname
    except ValueError:
        return ""
    return hostname or ""
