from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from trusted_conf import diagnostics
from trusted_conf.config.models import ImporterSettings
from trusted_conf.diagnostics import DiagnosticSink, LoggingDiagnosticSink
from trusted_conf.matcher import LineMatcher
from trusted_conf.models import (
    NOT_FOUND,
    ImportedValues,
    ImportResult,
    MissingVariables,
    MultiImportResult,
    ReadError,
    RequiredImportResult,
    VariableSpec,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _normalize_names(names: Iterable[str]) -> List[str]:
    if isinstance(names, str):
        raise TypeError("names must be a collection of variable names, not a single string.")
    unique = list(dict.fromkeys(names))
    if not unique:
        raise ValueError("At least one variable name is required.")
    return unique


class ConfigImporter:
    """
    Imports variable values from untrusted, line-oriented configuration files.

    Every call reads the whole file, scans its lines once and keeps the last valid
    definition of each requested name. Nothing is cached between calls. Problems with the
    file itself are reported to the diagnostic sink and through the returned value; they
    never raise.
    """

    def __init__(
        self,
        *,
        sink: Optional[DiagnosticSink] = None,
        encoding: str = "utf-8",
        escape_names: bool = True,
    ) -> None:
        self.sink: DiagnosticSink = sink if sink is not None else LoggingDiagnosticSink()
        self.encoding = encoding
        self.escape_names = escape_names

    @classmethod
    def from_settings(cls, settings: ImporterSettings, *, sink: Optional[DiagnosticSink] = None) -> "ConfigImporter":
        return cls(sink=sink, encoding=settings.encoding, escape_names=settings.escape_names)

    def import_one(
        self,
        path: PathLike,
        name: str,
        value_pattern: str,
        separator: str = "=",
    ) -> ImportResult:
        """Return the last valid definition of `name`, or NOT_FOUND if there is none or the file is unreadable."""
        matcher = LineMatcher(
            VariableSpec(name=name, value_pattern=value_pattern, separator=separator),
            escape_name=self.escape_names,
        )

        lines = self._read_lines(path)
        if isinstance(lines, ReadError):
            return NOT_FOUND

        value: Optional[str] = None
        for line in lines:
            candidate = matcher.match(line)
            if candidate is None:
                continue
            if value is not None:
                self.sink.warning(diagnostics.redefinition(name, value))
            value = candidate

        logger.debug("conf.scan_complete path=%s lines=%d matched=%d", path, len(lines), int(value is not None))
        if value is None:
            return NOT_FOUND
        return ImportResult(found=True, value=value)

    def import_many(
        self,
        path: PathLike,
        names: Iterable[str],
        value_pattern: str,
        separator: str = "=",
    ) -> MultiImportResult:
        """
        Import several variables sharing one separator and one value pattern.

        Names that never matched are left out of the mapping without any warning.
        """
        matchers = [
            LineMatcher(
                VariableSpec(name=name, value_pattern=value_pattern, separator=separator),
                escape_name=self.escape_names,
            )
            for name in _normalize_names(names)
        ]

        lines = self._read_lines(path)
        if isinstance(lines, ReadError):
            return lines

        values: Dict[str, str] = {}
        for line in lines:
            for matcher in matchers:
                candidate = matcher.match(line)
                if candidate is None:
                    continue
                previous = values.get(matcher.name)
                if previous is not None:
                    self.sink.warning(diagnostics.redefinition(matcher.name, previous))
                values[matcher.name] = candidate

        logger.debug(
            "conf.scan_complete path=%s lines=%d requested=%d matched=%d",
            path,
            len(lines),
            len(matchers),
            len(values),
        )
        return ImportedValues(values=values)

    def import_all_required(
        self,
        path: PathLike,
        names: Iterable[str],
        value_pattern: str,
        separator: str = "=",
    ) -> RequiredImportResult:
        """
        Like import_many, but fail unless every requested name was found.

        One warning is emitted per missing name. On failure, no values are returned.
        """
        requested = _normalize_names(names)
        result = self.import_many(path, requested, value_pattern, separator)
        if isinstance(result, ReadError):
            return result

        missing = [name for name in requested if name not in result.values]
        for name in missing:
            self.sink.warning(diagnostics.import_failed(name, path))
        if missing:
            logger.debug("conf.import_incomplete path=%s missing=%d", path, len(missing))
            return MissingVariables(path=str(path), missing=tuple(missing))
        return result

    def _read_lines(self, path: PathLike) -> Union[Sequence[str], ReadError]:
        try:
            text = Path(path).read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("conf.read_failed path=%s error=%s", path, exc)
            self.sink.warning(diagnostics.open_failed(path))
            return ReadError(path=str(path), reason=str(exc))
        return text.split("\n")


def import_conf(
    path: PathLike,
    name: str,
    value_pattern: str,
    separator: str = "=",
    *,
    sink: Optional[DiagnosticSink] = None,
    encoding: str = "utf-8",
    escape_names: bool = True,
) -> ImportResult:
    importer = ConfigImporter(sink=sink, encoding=encoding, escape_names=escape_names)
    return importer.import_one(path, name, value_pattern, separator)


def import_conf_many(
    path: PathLike,
    names: Iterable[str],
    value_pattern: str,
    separator: str = "=",
    *,
    sink: Optional[DiagnosticSink] = None,
    encoding: str = "utf-8",
    escape_names: bool = True,
) -> MultiImportResult:
    importer = ConfigImporter(sink=sink, encoding=encoding, escape_names=escape_names)
    return importer.import_many(path, names, value_pattern, separator)


def import_conf_all(
    path: PathLike,
    names: Iterable[str],
    value_pattern: str,
    separator: str = "=",
    *,
    sink: Optional[DiagnosticSink] = None,
    encoding: str = "utf-8",
    escape_names: bool = True,
) -> RequiredImportResult:
    importer = ConfigImporter(sink=sink, encoding=encoding, escape_names=escape_names)
    return importer.import_all_required(path, names, value_pattern, separator)
