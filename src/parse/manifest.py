"""go.mod discovery."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from errors import ManifestNotFound

MANIFEST_FILENAME = "go.mod"


@dataclass(frozen=True)
class ModuleInfo:
    """The project's own module: its import path and the directory of go.mod."""

    module_path: str
    root: Path

    def import_path_for(self, directory: Path) -> str:
        """Import path of a package directory inside the module."""
        rel = directory.resolve().relative_to(self.root).as_posix()
        if rel in ("", "."):
            return self.module_path
        return f"{self.module_path}/{rel}"


def parse_module_path(text: str) -> str | None:
    """Extract the module path from go.mod text.

    Examples:
        >>> parse_module_path("module example.com/app\\n\\ngo 1.22\\n")
        'example.com/app'
        >>> parse_module_path('module "example.com/quoted" // legacy\\n')
        'example.com/quoted'
    """
    for raw_line in text.splitlines():
        line = raw_line.split("//", 1)[0].strip()
        if not line.startswith("module"):
            continue
        rest = line[len("module") :].strip()
        if not rest or rest == "(":
            continue
        return rest.strip('"`')
    return None


def find_module(start: Path) -> ModuleInfo:
    """Walk upward from ``start`` until a go.mod declaring a module is found.

    Raises:
        ManifestNotFound: When no go.mod exists up to the filesystem root, or
            the nearest one declares no module path.
    """
    directory = start.resolve()
    if directory.is_file():
        directory = directory.parent

    for candidate in (directory, *directory.parents):
        manifest = candidate / MANIFEST_FILENAME
        if not manifest.is_file():
            continue
        try:
            text = manifest.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read {manifest}: {exc}"
            raise ManifestNotFound(msg) from exc
        module_path = parse_module_path(text)
        if module_path is None:
            msg = f"No module declaration in {manifest}"
            raise ManifestNotFound(msg)
        return ModuleInfo(module_path=module_path, root=candidate)

    msg = f"{MANIFEST_FILENAME} not found in {directory} or any parent directory"
    raise ManifestNotFound(msg)


__all__ = ["MANIFEST_FILENAME", "ModuleInfo", "find_module", "parse_module_path"]
