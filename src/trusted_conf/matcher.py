from __future__ import annotations

import re
from typing import Optional

from trusted_conf.models import VariableSpec

# Accepted line end after a value: blanks, then an optional '#' comment.
LINE_END = r"[\s]*(?:#.*)?"


def _name_fragment(name: str, escape_name: bool) -> tuple[str, int]:
    """Return the regex text for `name` and the number of groups it opens."""
    if escape_name:
        return re.escape(name), 0
    try:
        return name, re.compile(name).groups
    except re.error as exc:
        raise ValueError(f"Invalid variable name pattern: {name!r} ({exc})") from exc


def build_line_pattern(
    name: str,
    value_pattern: str,
    separator: str = "=",
    *,
    escape_name: bool = True,
) -> re.Pattern[str]:
    """
    Compile the whole-line rule `name<separator>(value)<line end>`.

    The result is meant for `fullmatch` against a single line without its terminator.
    The value is held by group `value_group_index(name, escape_name=...)`: group 1 for
    literal names, later if an unescaped name opens groups of its own.
    """
    if not name:
        raise ValueError("Variable name must not be empty.")
    if not separator:
        raise ValueError(f"Separator for {name!r} must not be empty.")

    name_part, _ = _name_fragment(name, escape_name)
    source = f"(?:{name_part}){re.escape(separator)}({value_pattern}){LINE_END}"
    try:
        return re.compile(source)
    except re.error as exc:
        raise ValueError(f"Invalid value pattern for {name!r}: {value_pattern!r} ({exc})") from exc


def value_group_index(name: str, *, escape_name: bool = True) -> int:
    _, name_groups = _name_fragment(name, escape_name)
    return name_groups + 1


class LineMatcher:
    def __init__(self, spec: VariableSpec, *, escape_name: bool = True) -> None:
        self.spec = spec
        self._pattern = build_line_pattern(
            spec.name,
            spec.value_pattern,
            spec.separator,
            escape_name=escape_name,
        )
        self._value_group = value_group_index(spec.name, escape_name=escape_name)

    @property
    def name(self) -> str:
        return self.spec.name

    def match(self, line: str) -> Optional[str]:
        """Return the captured value if the whole line is a valid assignment, else None."""
        m = self._pattern.fullmatch(line)
        if m is None:
            return None
        return m.group(self._value_group)
