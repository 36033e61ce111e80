"""Conventional Commit grammar parser.

Splits a raw commit message into header, body and footers and decomposes
the header into type, scope, breaking marker and subject::

    type(scope)!: subject

The parser never raises. Headers that do not match the grammar produce a
ParsedMessage whose ``type`` and ``subject`` are None; the evaluator turns
that into a ``format`` violation.
"""
import re
from typing import List, Tuple

from .models import ParsedMessage

HEADER_RE = re.compile(
    r"^(?P<type>[a-z]+)"
    r"(?:\((?P<scope>[^()]*)\))?"
    r"(?P<breaking>!)?"
    r": "
    r"(?P<subject>.*)$"
)

# Git trailer shapes: "Token: value", "Token #value" and the two
# spellings of the breaking change footer.
FOOTER_RE = re.compile(
    r"^(?:BREAKING[ -]CHANGE|[A-Za-z][\w-]*)(?::[ \t]|[ \t]#)"
)
BREAKING_FOOTER_RE = re.compile(r"^BREAKING[ -]CHANGE:[ \t]")


def _split_footers(paragraphs: List[str]) -> Tuple[str, Tuple[str, ...]]:
    """Separate a trailing trailer paragraph from the body."""
    if not paragraphs:
        return "", ()
    last = [line for line in paragraphs[-1].split("\n") if line.strip()]
    if all(FOOTER_RE.match(line) for line in last):
        body = "\n\n".join(paragraphs[:-1])
        return body, tuple(last)
    return "\n\n".join(paragraphs), ()


def parse(raw: str) -> ParsedMessage:
    """Parse a raw commit message or PR title.

    Args:
        raw: The message text as received, possibly multi-line

    Returns:
        ParsedMessage: Best-effort decomposition; never raises
    """
    if raw is None:
        raw = ""
    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    lines = text.split("\n")
    header = lines[0]

    # Body starts after the first blank line following the header
    rest = lines[1:]
    while rest and rest[0].strip():
        rest = rest[1:]
    remainder = "\n".join(rest).strip("\n")
    paragraphs = [p.strip("\n") for p in re.split(r"\n[ \t]*\n", remainder) if p.strip()]
    body, footers = _split_footers(paragraphs)
    breaking_footer = any(BREAKING_FOOTER_RE.match(f) for f in footers)

    match = HEADER_RE.match(header)
    if not match:
        return ParsedMessage(
            raw=raw,
            header=header,
            body=body,
            footers=footers,
            breaking_change_footer=breaking_footer,
        )

    return ParsedMessage(
        raw=raw,
        header=header,
        type=match.group("type"),
        scope=match.group("scope"),
        breaking=match.group("breaking") is not None,
        subject=match.group("subject").rstrip(),
        body=body,
        footers=footers,
        breaking_change_footer=breaking_footer,
    )
