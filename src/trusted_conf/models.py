from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Union


@dataclass(frozen=True, slots=True)
class VariableSpec:
    """
    One `name<separator>value` assignment to look for.

    `name` and `separator` are literal text; `value_pattern` is a regular expression the
    captured value must satisfy in full.
    """

    name: str
    value_pattern: str
    separator: str = "="


@dataclass(frozen=True, slots=True)
class ImportResult:
    found: bool
    value: Optional[str] = None


NOT_FOUND = ImportResult(found=False)


@dataclass(frozen=True, slots=True)
class ImportedValues:
    """Names matched at least once, mapped to their last valid value."""

    values: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class ReadError:
    """The file could not be opened or decoded; no line was examined."""

    path: str
    reason: str

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class MissingVariables:
    """
    A completeness-checked import failed.

    Only the names that were not found are carried here; values found for the other
    names are not included.
    """

    path: str
    missing: Sequence[str]

    @property
    def ok(self) -> bool:
        return False


MultiImportResult = Union[ImportedValues, ReadError]
RequiredImportResult = Union[ImportedValues, ReadError, MissingVariables]
