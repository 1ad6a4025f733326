"""
Field extraction for hand-authored markdown artifacts.

Ledgers and handoffs are written by people and by other tools, so their
structure is loose. Each field is described by a FieldRule (a data entry,
not parsing code) and extraction always falls back to the rule's default
instead of raising.

Two kinds of rules are supported:
- heading: body of a "## <heading>" section, up to the next "## " heading
- marker: rest of the line following an inline marker such as "- Now: "
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class FieldRule:
    """Extraction rule for one named field.

    Attributes:
        name: Key under which the value is returned by extract_fields.
        heading: Section heading text (without the leading "## ").
        marker: Single-line marker prefix, e.g. "- Now: ".
        max_lines: Keep only the first N lines of the match.
        separator: Joins the kept lines when max_lines is set.
        max_chars: Hard truncation bound applied last.
        default: Returned when nothing usable matches.
    """

    name: str
    heading: Optional[str] = None
    marker: Optional[str] = None
    max_lines: Optional[int] = None
    separator: str = "; "
    max_chars: Optional[int] = None
    default: str = ""

    def __post_init__(self) -> None:
        if (self.heading is None) == (self.marker is None):
            raise ValueError(f"FieldRule {self.name!r} needs exactly one of heading or marker")

    def pattern(self) -> re.Pattern[str]:
        if self.heading is not None:
            return re.compile(
                r"^##[ \t]+" + re.escape(self.heading) + r"[ \t]*$\n?(.*?)(?=^##[ \t]|\Z)",
                re.MULTILINE | re.DOTALL,
            )
        return re.compile(re.escape(self.marker or "") + r"([^\n]*)")


def _normalize(text: Any) -> str:
    if not isinstance(text, str):
        return ""
    return text.replace("\r\n", "\n")


def extract_field(text: Any, rule: FieldRule) -> str:
    """
    Extract a single field from text.

    Args:
        text: Raw artifact text. Non-string values are treated as empty.
        rule: The rule describing what to extract.

    Returns:
        The trimmed, line-limited and truncated match, or rule.default.
    """
    match = rule.pattern().search(_normalize(text))
    if match is None:
        return rule.default

    value = match.group(1).strip()
    if not value:
        return rule.default

    if rule.max_lines is not None:
        value = rule.separator.join(value.split("\n")[: rule.max_lines])

    if rule.max_chars is not None:
        value = value[: rule.max_chars]

    return value


def extract_fields(text: Any, rules: Iterable[FieldRule]) -> dict[str, str]:
    """Apply an ordered list of rules, returning {rule.name: value}."""
    return {rule.name: extract_field(text, rule) for rule in rules}


def search_pattern(
    text: Any,
    pattern: str | re.Pattern[str],
    group: int = 1,
    flags: int = 0,
    default: Optional[str] = None,
) -> Optional[str]:
    """
    Search text for an inline token such as a status marker.

    Returns the requested group, or default when there is no match.
    """
    if not isinstance(text, str):
        return default
    if isinstance(pattern, str):
        match = re.search(pattern, text, flags)
    else:
        match = pattern.search(text)
    if match is None:
        return default
    value = match.group(group)
    return value if value is not None else default
