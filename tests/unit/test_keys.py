import unittest

from assetstage.crypto.keys import (
    DEFAULT_KEY_ENV,
    describe_key,
    require_key_name,
    resolve_decryption_key,
)
from assetstage.errors import MissingKeyError
from tests.test_support import TEST_KEY_ENV, temp_env


class TestResolveDecryptionKey(unittest.TestCase):
    def test_returns_stripped_value(self) -> None:
        key = resolve_decryption_key(TEST_KEY_ENV, environ={TEST_KEY_ENV: "  AGE-SECRET-KEY-1X \n"})
        self.assertEqual(key, "AGE-SECRET-KEY-1X")

    def test_missing_and_blank_values_raise(self) -> None:
        for environ in ({}, {TEST_KEY_ENV: ""}, {TEST_KEY_ENV: "   "}):
            with self.subTest(environ=environ):
                with self.assertRaises(MissingKeyError) as ctx:
                    resolve_decryption_key(TEST_KEY_ENV, environ=environ)
                self.assertEqual(ctx.exception.var_name, TEST_KEY_ENV)
                self.assertIn(TEST_KEY_ENV, str(ctx.exception))

    def test_reads_process_environment_by_default(self) -> None:
        with temp_env({TEST_KEY_ENV: "secret-value"}):
            self.assertEqual(resolve_decryption_key(TEST_KEY_ENV), "secret-value")

    def test_invalid_names_rejected(self) -> None:
        for name in ("", "  ", "1ABC", "HAS-DASH", "with space"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    require_key_name(name)
        self.assertEqual(require_key_name(f" {DEFAULT_KEY_ENV} "), DEFAULT_KEY_ENV)

    def test_describe_key_never_includes_value(self) -> None:
        described = describe_key(TEST_KEY_ENV, environ={TEST_KEY_ENV: "AGE-SECRET-KEY-1TOPSECRET"})
        self.assertEqual(described, {"env": TEST_KEY_ENV, "value": "<redacted>"})
        self.assertEqual(describe_key(TEST_KEY_ENV, environ={})["value"], "<unset>")


if __name__ == "__main__":
    unittest.main()
