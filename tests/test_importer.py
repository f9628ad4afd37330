import os
import tempfile
import unittest
from pathlib import Path

from trusted_conf.config.models import ImporterSettings
from trusted_conf.diagnostics import RecordingDiagnosticSink
from trusted_conf.importer import ConfigImporter, import_conf, import_conf_all, import_conf_many
from trusted_conf.models import NOT_FOUND, ImportedValues, MissingVariables, ReadError

SAMPLE = "FOO=bar\n# a comment line\nFOO=baz\n"


class ImporterTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.dir = Path(self._tmp.name)
        self.sink = RecordingDiagnosticSink()
        self.importer = ConfigImporter(sink=self.sink)

    def write(self, text: str, name: str = "app.conf", encoding: str = "utf-8") -> Path:
        path = self.dir / name
        path.write_text(text, encoding=encoding)
        return path

    @property
    def missing_path(self) -> Path:
        return self.dir / "does-not-exist.conf"


class ImportOneTests(ImporterTestCase):
    def test_last_definition_wins_with_one_redefinition_warning(self) -> None:
        path = self.write(SAMPLE)
        result = self.importer.import_one(path, "FOO", r"\w+", "=")
        self.assertTrue(result.found)
        self.assertEqual(result.value, "baz")
        self.assertEqual(self.sink.messages, ["redefinition of FOO, overriding bar"])

    def test_default_separator_is_equals(self) -> None:
        path = self.write(SAMPLE)
        self.assertEqual(self.importer.import_one(path, "FOO", r"\w+").value, "baz")

    def test_one_warning_per_redefinition(self) -> None:
        path = self.write("FOO=1\nFOO=2\nFOO=3\nFOO=4\n")
        result = self.importer.import_one(path, "FOO", r"[0-9]")
        self.assertEqual(result.value, "4")
        self.assertEqual(
            self.sink.messages,
            [
                "redefinition of FOO, overriding 1",
                "redefinition of FOO, overriding 2",
                "redefinition of FOO, overriding 3",
            ],
        )

    def test_invalid_later_line_does_not_override(self) -> None:
        path = self.write("FOO=good\nFOO=bad value\nFOO=$(evil)\n")
        result = self.importer.import_one(path, "FOO", r"\w+")
        self.assertEqual(result.value, "good")
        self.assertEqual(self.sink.messages, [])

    def test_not_found_is_silent(self) -> None:
        path = self.write(SAMPLE)
        self.assertEqual(self.importer.import_one(path, "BAZ", r"\w+"), NOT_FOUND)
        self.assertEqual(self.sink.messages, [])

    def test_spaces_around_separator_do_not_match(self) -> None:
        path = self.write("BAZ = qux\n")
        self.assertFalse(self.importer.import_one(path, "BAZ", r"\w+", "=").found)

    def test_custom_separator(self) -> None:
        path = self.write("PORT: 8080  # listen port\n")
        result = self.importer.import_one(path, "PORT", r"[0-9]+", ": ")
        self.assertEqual(result.value, "8080")

    def test_empty_value_counts_as_found(self) -> None:
        path = self.write("FOO=\n")
        result = self.importer.import_one(path, "FOO", r"\w*")
        self.assertTrue(result.found)
        self.assertEqual(result.value, "")

    def test_crlf_line_endings(self) -> None:
        path = self.dir / "dos.conf"
        path.write_bytes(b"FOO=bar\r\nBAR=qux\r\n")
        self.assertEqual(self.importer.import_one(path, "BAR", r"\w+").value, "qux")

    def test_unreadable_file(self) -> None:
        result = self.importer.import_one(self.missing_path, "FOO", r"\w+")
        self.assertEqual(result, NOT_FOUND)
        self.assertEqual(self.sink.messages, [f"could not open {self.missing_path} for reading"])

    def test_undecodable_file_is_unreadable(self) -> None:
        path = self.dir / "latin.conf"
        path.write_bytes("FOO=caf\xe9\n".encode("latin-1"))
        result = self.importer.import_one(path, "FOO", r".+")
        self.assertFalse(result.found)
        self.assertEqual(self.sink.messages, [f"could not open {path} for reading"])

    def test_caller_defined_encoding(self) -> None:
        path = self.write("FOO=caf\xe9\n", encoding="latin-1")
        importer = ConfigImporter(sink=self.sink, encoding="latin-1")
        self.assertEqual(importer.import_one(path, "FOO", r".+").value, "caf\xe9")

    def test_directory_is_unreadable(self) -> None:
        self.assertFalse(self.importer.import_one(self.dir, "FOO", r"\w+").found)
        self.assertEqual(len(self.sink.messages), 1)

    def test_bad_pattern_raises_before_reading(self) -> None:
        with self.assertRaises(ValueError):
            self.importer.import_one(self.missing_path, "FOO", r"[")
        self.assertEqual(self.sink.messages, [])

    def test_accepts_str_path(self) -> None:
        path = self.write(SAMPLE)
        self.assertEqual(self.importer.import_one(os.fspath(path), "FOO", r"\w+").value, "baz")


class ImportManyTests(ImporterTestCase):
    def test_found_names_only(self) -> None:
        path = self.write(SAMPLE)
        result = self.importer.import_many(path, ["FOO", "BAZ"], r"\w+", "=")
        self.assertIsInstance(result, ImportedValues)
        self.assertTrue(result.ok)
        self.assertEqual(dict(result.values), {"FOO": "baz"})
        self.assertEqual(self.sink.messages, ["redefinition of FOO, overriding bar"])

    def test_several_names_share_one_scan(self) -> None:
        path = self.write("A=1\nB=2\nunrelated text\nA=3\nC=x\n")
        result = self.importer.import_many(path, ["A", "B", "C"], r"[0-9]+")
        self.assertEqual(dict(result.values), {"A": "3", "B": "2"})
        self.assertEqual(self.sink.messages, ["redefinition of A, overriding 1"])

    def test_never_returns_unrequested_keys(self) -> None:
        path = self.write("A=1\nB=2\nC=3\n")
        result = self.importer.import_many(path, ["B"], r"[0-9]")
        self.assertEqual(set(result.values), {"B"})

    def test_zero_matches_is_empty_success(self) -> None:
        path = self.write("nothing to see here\n")
        result = self.importer.import_many(path, ["FOO"], r"\w+")
        self.assertIsInstance(result, ImportedValues)
        self.assertEqual(dict(result.values), {})
        self.assertEqual(self.sink.messages, [])

    def test_unreadable_file_is_read_error(self) -> None:
        result = self.importer.import_many(self.missing_path, ["FOO", "BAR"], r"\w+")
        self.assertIsInstance(result, ReadError)
        self.assertFalse(result.ok)
        self.assertEqual(result.path, str(self.missing_path))
        self.assertEqual(self.sink.messages, [f"could not open {self.missing_path} for reading"])

    def test_duplicate_names_are_tolerated(self) -> None:
        path = self.write("FOO=1\n")
        result = self.importer.import_many(path, ["FOO", "FOO"], r"[0-9]")
        self.assertEqual(dict(result.values), {"FOO": "1"})
        self.assertEqual(self.sink.messages, [])

    def test_names_must_be_a_collection(self) -> None:
        path = self.write(SAMPLE)
        with self.assertRaises(TypeError):
            self.importer.import_many(path, "FOO", r"\w+")
        with self.assertRaises(ValueError):
            self.importer.import_many(path, [], r"\w+")

    def test_prefix_names_are_independent(self) -> None:
        path = self.write("FOO=1\nFOO_BAR=2\n")
        result = self.importer.import_many(path, ["FOO", "FOO_BAR"], r"[0-9]")
        self.assertEqual(dict(result.values), {"FOO": "1", "FOO_BAR": "2"})

    def test_one_line_may_satisfy_several_names_when_names_are_patterns(self) -> None:
        path = self.write("AB=1\n")
        importer = ConfigImporter(sink=self.sink, escape_names=False)
        result = importer.import_many(path, ["A.", ".B"], r"[0-9]")
        self.assertEqual(dict(result.values), {"A.": "1", ".B": "1"})

    def test_grouped_name_patterns_capture_values(self) -> None:
        path = self.write("FOO=1\nBAR=2\n")
        importer = ConfigImporter(sink=self.sink, escape_names=False)
        result = importer.import_many(path, ["(FOO|BAR)"], r"[0-9]")
        self.assertEqual(dict(result.values), {"(FOO|BAR)": "2"})
        self.assertEqual(self.sink.messages, ["redefinition of (FOO|BAR), overriding 1"])


class ImportAllRequiredTests(ImporterTestCase):
    def test_complete_import(self) -> None:
        path = self.write("FOO=bar\nBAZ=qux\n")
        result = self.importer.import_all_required(path, ["FOO", "BAZ"], r"\w+", "=")
        self.assertIsInstance(result, ImportedValues)
        self.assertEqual(dict(result.values), {"FOO": "bar", "BAZ": "qux"})
        self.assertEqual(self.sink.messages, [])

    def test_missing_name_fails_whole_import(self) -> None:
        path = self.write(SAMPLE)
        result = self.importer.import_all_required(path, ["FOO", "BAZ"], r"\w+", "=")
        self.assertIsInstance(result, MissingVariables)
        self.assertFalse(result.ok)
        self.assertEqual(tuple(result.missing), ("BAZ",))
        self.assertFalse(hasattr(result, "values"))
        self.assertEqual(
            self.sink.messages,
            [
                "redefinition of FOO, overriding bar",
                f"failed to import BAZ from {path}",
            ],
        )

    def test_one_warning_per_missing_name_in_request_order(self) -> None:
        path = self.write("B=1\n")
        result = self.importer.import_all_required(path, ["C", "B", "A"], r"[0-9]")
        self.assertEqual(tuple(result.missing), ("C", "A"))
        self.assertEqual(
            self.sink.messages,
            [f"failed to import C from {path}", f"failed to import A from {path}"],
        )

    def test_unreadable_file_emits_only_open_warning(self) -> None:
        result = self.importer.import_all_required(self.missing_path, ["FOO", "BAZ"], r"\w+")
        self.assertIsInstance(result, ReadError)
        self.assertEqual(self.sink.messages, [f"could not open {self.missing_path} for reading"])


class ModuleFunctionTests(ImporterTestCase):
    def test_import_conf(self) -> None:
        path = self.write(SAMPLE)
        result = import_conf(path, "FOO", r"\w+", sink=self.sink)
        self.assertEqual(result.value, "baz")
        self.assertEqual(len(self.sink.messages), 1)

    def test_import_conf_many_with_separator(self) -> None:
        path = self.write("A:1\nB:2\n")
        result = import_conf_many(path, ["A", "B"], r"[0-9]", ":", sink=self.sink)
        self.assertEqual(dict(result.values), {"A": "1", "B": "2"})

    def test_import_conf_all(self) -> None:
        path = self.write("A=1\n")
        self.assertIsInstance(import_conf_all(path, ["A", "B"], r"[0-9]", sink=self.sink), MissingVariables)
        self.assertIsInstance(import_conf_all(path, ["A"], r"[0-9]", sink=self.sink), ImportedValues)

    def test_default_sink_logs_warnings(self) -> None:
        with self.assertLogs("trusted_conf.diagnostics", level="WARNING") as logs:
            import_conf(self.missing_path, "FOO", r"\w+")
        self.assertEqual(len(logs.output), 1)
        self.assertIn(f"could not open {self.missing_path} for reading", logs.output[0])

    def test_from_settings(self) -> None:
        path = self.write("A.B=1\n", encoding="latin-1")
        importer = ConfigImporter.from_settings(
            ImporterSettings(encoding="latin-1", escape_names=False),
            sink=self.sink,
        )
        self.assertEqual(importer.encoding, "latin-1")
        self.assertTrue(importer.import_one(path, "A.B", r"[0-9]").found)
        self.assertIs(importer.sink, self.sink)


if __name__ == "__main__":
    unittest.main()
