#!/usr/bin/env python3
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

from __future__ import annotations

import json
import keyword
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

LOGGER = logging.getLogger("assetstage.manifest")

ManifestFormat = Literal["python", "typescript"]
MANIFEST_FORMATS: tuple[str, ...] = ("python", "typescript")
DEFAULT_MANIFEST_MODULE = "assetstage_assets"

_GENERATED_NOTICE = "Generated by assetstage. Do not edit."


@dataclass(frozen=True)
class Manifest:
    module: str
    names: tuple[str, ...]

    def render(self, fmt: ManifestFormat = "python") -> str:
        if fmt == "python":
            return render_python_stub(self)
        if fmt == "typescript":
            return render_typescript_declaration(self)
        raise ValueError(f"unsupported manifest format: {fmt}")


def validate_module_name(module: str, fmt: ManifestFormat = "python") -> str:
    value = module.strip() if isinstance(module, str) else ""
    if not value:
        raise ValueError("manifest module name cannot be empty")
    if fmt == "python":
        parts = value.split(".")
        if not all(part.isidentifier() and not keyword.iskeyword(part) for part in parts):
            raise ValueError(f"manifest module must be a dotted Python identifier: {module!r}")
    elif fmt != "typescript":
        raise ValueError(f"unsupported manifest format: {fmt}")
    return value


def scan_asset_names(dest_dir: str | Path) -> tuple[str, ...]:
    """Return the sorted, de-duplicated asset names found directly in ``dest_dir``.

    A name is the file name without its last extension. Hidden files (including
    in-flight ``.part`` files) and subdirectories are ignored.
    """
    root = Path(dest_dir)
    if not root.is_dir():
        return ()
    names: set[str] = set()
    with os.scandir(root) as entries:
        for entry in entries:
            if entry.name.startswith("."):
                continue
            if not entry.is_file():
                continue
            stem = Path(entry.name).stem
            if stem:
                names.add(stem)
    return tuple(sorted(names))


def generate_manifest(
    dest_dir: str | Path,
    *,
    module: str = DEFAULT_MANIFEST_MODULE,
    logger: logging.Logger | None = None,
) -> Manifest:
    log = logger or LOGGER
    names = scan_asset_names(dest_dir)
    log.debug("Found %d asset name(s) in %s", len(names), dest_dir)
    return Manifest(module=module, names=names)


def render_python_stub(manifest: Manifest) -> str:
    if manifest.names:
        literals = ", ".join(_quote(name) for name in manifest.names)
        typing_import = "from typing import Final, Literal"
        alias = f"AssetName = Literal[{literals}]"
        values = f"({literals},)"
    else:
        # an empty Literal is not valid; Never keeps every reference a type error
        typing_import = "from typing import Final, Never"
        alias = "AssetName = Never"
        values = "()"
    return "\n".join(
        [
            f"# {_GENERATED_NOTICE}",
            f"# Module: {manifest.module}",
            typing_import,
            "",
            alias,
            "",
            f"ASSET_NAMES: Final[tuple[AssetName, ...]] = {values}",
            "",
        ]
    )


def render_typescript_declaration(manifest: Manifest) -> str:
    union = " | ".join(_quote(name) for name in manifest.names) or "never"
    array = ", ".join(_quote(name) for name in manifest.names)
    return "\n".join(
        [
            f"// {_GENERATED_NOTICE}",
            f"declare module {_quote(manifest.module)} {{",
            f"  export type AssetName = {union};",
            f"  export const assetNames: readonly [{array}];",
            "}",
            "",
        ]
    )


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def write_manifest(
    manifest: Manifest,
    path: str | Path,
    *,
    fmt: ManifestFormat = "python",
) -> bool:
    """Write the rendered manifest to ``path``; return False when it is already current."""
    target = Path(path)
    content = manifest.render(fmt).encode("utf-8")
    try:
        if target.read_bytes() == content:
            return False
    except FileNotFoundError:
        pass
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return True
