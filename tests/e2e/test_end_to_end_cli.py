# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

import subprocess
import sys
import unittest

from tests.test_support import (
    TEST_KEY_ENV,
    build_cli_env,
    make_encrypted_archive,
    temp_directory,
)


class TestEndToEndCli(unittest.TestCase):
    def _run(self, args: list[str], *, env: dict[str, str], cwd) -> subprocess.CompletedProcess:
        return subprocess.run(
            [sys.executable, "-m", "assetstage.cli", *args],
            capture_output=True,
            text=True,
            env=build_cli_env(overrides=env),
            cwd=cwd,
            check=False,
        )

    def test_stage_twice_from_local_config(self) -> None:
        with temp_directory() as tmp:
            (tmp / "assetstage.toml").write_text(
                "[archive]\n"
                'path = "icons.tar.gz.age"\n'
                "[key]\n"
                f'env = "{TEST_KEY_ENV}"\n'
                "[staging]\n"
                'dir = "icons"\n'
                "[manifest]\n"
                'module = "virtual:icons"\n'
                'format = "typescript"\n'
                'path = "icons.d.ts"\n',
                encoding="utf-8",
            )
            ciphertext, identity = make_encrypted_archive(
                {"set/a.png": b"a", "set/b.png": b"b", "c.svg": b"c"},
                directories=("set",),
            )
            (tmp / "icons.tar.gz.age").write_bytes(ciphertext)

            first = self._run(["stage"], env={TEST_KEY_ENV: identity}, cwd=tmp)
            self.assertEqual(first.returncode, 0, first.stderr)
            declaration = (tmp / "icons.d.ts").read_bytes()
            self.assertIn(b'export type AssetName = "a" | "b" | "c";', declaration)

            (tmp / "icons.tar.gz.age").unlink()
            second = self._run(["stage", "--require-assets"], env={TEST_KEY_ENV: ""}, cwd=tmp)
            self.assertEqual(second.returncode, 0, second.stderr)
            self.assertEqual((tmp / "icons.d.ts").read_bytes(), declaration)

    def test_missing_archive_exits_cleanly(self) -> None:
        with temp_directory() as tmp:
            (tmp / "assetstage.toml").write_text(
                '[archive]\npath = "none.age"\n[staging]\ndir = "out"\n',
                encoding="utf-8",
            )
            result = self._run(["stage"], env={}, cwd=tmp)
            self.assertEqual(result.returncode, 0, result.stderr)
            self.assertIn("not found", result.stderr)
            self.assertFalse((tmp / "out").exists())


if __name__ == "__main__":
    unittest.main()
