import unittest

from assetstage.staging.manifest import (
    Manifest,
    generate_manifest,
    render_python_stub,
    render_typescript_declaration,
    scan_asset_names,
    validate_module_name,
    write_manifest,
)
from tests.test_support import temp_directory


class TestManifest(unittest.TestCase):
    def test_scan_strips_extension_sorts_and_skips_noise(self) -> None:
        with temp_directory() as tmp:
            for name in ("zeta.svg", "alpha.png", "alpha.svg", "archive.tar.gz", ".a.png.x.part"):
                (tmp / name).write_bytes(b"x")
            (tmp / "subdir").mkdir()
            (tmp / "subdir" / "inner.png").write_bytes(b"x")
            self.assertEqual(scan_asset_names(tmp), ("alpha", "archive.tar", "zeta"))

    def test_scan_missing_directory_is_empty(self) -> None:
        with temp_directory() as tmp:
            self.assertEqual(scan_asset_names(tmp / "missing"), ())

    def test_generation_is_deterministic(self) -> None:
        with temp_directory() as tmp:
            for name in ("c.svg", "a.png", "b.png"):
                (tmp / name).write_bytes(b"x")
            first = generate_manifest(tmp, module="icons")
            second = generate_manifest(tmp, module="icons")
            self.assertEqual(first, second)
            self.assertEqual(first.names, ("a", "b", "c"))
            self.assertEqual(first.render("python"), second.render("python"))
            self.assertEqual(first.render("typescript"), second.render("typescript"))

    def test_python_stub(self) -> None:
        text = render_python_stub(Manifest(module="site.icons", names=("a", "b")))
        self.assertIn("# Module: site.icons", text)
        self.assertIn('AssetName = Literal["a", "b"]', text)
        self.assertIn('ASSET_NAMES: Final[tuple[AssetName, ...]] = ("a", "b",)', text)
        self.assertTrue(text.endswith("\n"))

    def test_python_stub_empty_uses_never(self) -> None:
        text = render_python_stub(Manifest(module="icons", names=()))
        self.assertIn("from typing import Final, Never", text)
        self.assertIn("AssetName = Never", text)
        self.assertIn("= ()", text)
        self.assertNotIn("Literal[", text)

    def test_typescript_declaration(self) -> None:
        text = render_typescript_declaration(Manifest(module="virtual:icons", names=("a", "b")))
        self.assertIn('declare module "virtual:icons" {', text)
        self.assertIn('export type AssetName = "a" | "b";', text)
        empty = render_typescript_declaration(Manifest(module="virtual:icons", names=()))
        self.assertIn("export type AssetName = never;", empty)

    def test_names_are_quoted(self) -> None:
        text = render_python_stub(Manifest(module="icons", names=('say "hi"',)))
        self.assertIn('Literal["say \\"hi\\""]', text)

    def test_unknown_format_raises(self) -> None:
        with self.assertRaises(ValueError):
            Manifest(module="icons", names=()).render("json")  # type: ignore[arg-type]

    def test_validate_module_name(self) -> None:
        self.assertEqual(validate_module_name(" site.icons "), "site.icons")
        self.assertEqual(validate_module_name("virtual:icons", "typescript"), "virtual:icons")
        for bad in ("", "virtual:icons", "site..icons", "class", "1icons"):
            with self.subTest(module=bad):
                with self.assertRaises(ValueError):
                    validate_module_name(bad, "python")

    def test_write_manifest_only_when_changed(self) -> None:
        manifest = Manifest(module="icons", names=("a",))
        with temp_directory() as tmp:
            target = tmp / "out" / "icons.pyi"
            self.assertTrue(write_manifest(manifest, target))
            before = target.read_bytes()
            self.assertFalse(write_manifest(manifest, target))
            self.assertEqual(target.read_bytes(), before)
            self.assertTrue(write_manifest(Manifest(module="icons", names=("a", "b")), target))
            self.assertIn(b'"b"', target.read_bytes())
            self.assertEqual(sorted(p.name for p in target.parent.iterdir()), ["icons.pyi"])


if __name__ == "__main__":
    unittest.main()
