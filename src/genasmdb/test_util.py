import contextlib
import io
import os
import unittest
from unittest import mock

from genasmdb.util import (
    LogType,
    log,
    silenced_kinds,
)


def silenced(value):
    if value is not None:
        value = os.environ.encodevalue(value)
    kinds = silenced_kinds(value)
    return sorted(kind.value for kind in LogType if kinds[kind])


class TestSilenceLog(unittest.TestCase):
    def test_patterns(self):
        cases = [
            (None, []),
            ("", ["decode", "default", "extract"]),
            ("true", ["decode", "default", "extract"]),
            ("1", ["decode", "default", "extract"]),
            ("false", []),
            ("0", []),
            ("decode", ["decode"]),
            ("decode,", ["decode"]),
            ("de*", ["decode", "default"]),
            ("*, !extract", ["decode", "default"]),
        ]
        for (value, expected) in cases:
            with self.subTest(value=value):
                self.assertEqual(silenced(value), expected)

    def test_unknown_kind(self):
        with self.assertRaises(AssertionError):
            silenced("nosuchkind")

    def test_log(self):
        with mock.patch.dict(os.environ, {"SILENCELOG": "extract"}):
            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                log("shown", 1)
                log("hidden", kind=LogType.Extract)
        self.assertEqual(stdout.getvalue(), "shown 1\n")


if __name__ == "__main__":
    unittest.main()
