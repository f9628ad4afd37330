"""Import validated variable values from untrusted line-oriented configuration files."""

from trusted_conf.diagnostics import DiagnosticSink, LoggingDiagnosticSink, RecordingDiagnosticSink
from trusted_conf.importer import ConfigImporter, import_conf, import_conf_all, import_conf_many
from trusted_conf.matcher import LineMatcher, build_line_pattern, value_group_index
from trusted_conf.models import (
    NOT_FOUND,
    ImportedValues,
    ImportResult,
    MissingVariables,
    ReadError,
    VariableSpec,
)

__all__ = [
    "NOT_FOUND",
    "ConfigImporter",
    "DiagnosticSink",
    "ImportResult",
    "ImportedValues",
    "LineMatcher",
    "LoggingDiagnosticSink",
    "MissingVariables",
    "ReadError",
    "RecordingDiagnosticSink",
    "VariableSpec",
    "build_line_pattern",
    "import_conf",
    "import_conf_all",
    "import_conf_many",
    "value_group_index",
]
