"""Source indexer: walk a Go tree and build the function registry."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from errors import FileParseError
from index.registry import FunctionRegistry, RegistryBuilder
from parse.go_functions import extract_functions
from parse.go_imports import build_import_table
from parse.go_parser import package_name, parse_go_file
from parse.manifest import ModuleInfo, find_module
from scan.files import find_go_files

if TYPE_CHECKING:
    from index.descriptors import FunctionDescriptor
    from parse.go_imports import ImportTable
    from rules.config import GoCallMapConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedFile:
    """Everything indexing learns from one source file."""

    path: str
    rel_path: str
    package: str
    package_path: str
    import_table: ImportTable
    descriptors: list[FunctionDescriptor]


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: str


@dataclass(frozen=True)
class IndexResult:
    """Frozen registry plus the per-file data collected along the way."""

    registry: FunctionRegistry
    module: ModuleInfo
    import_tables: dict[str, ImportTable] = field(default_factory=dict)
    skipped: tuple[SkippedFile, ...] = ()
    file_count: int = 0

    @property
    def module_path(self) -> str:
        return self.module.module_path


def _check_root(root: Path) -> Path:
    if not root.exists():
        msg = f"Root directory does not exist: {root}"
        raise FileNotFoundError(msg)
    if not root.is_dir():
        msg = f"Root path is not a directory: {root}"
        raise NotADirectoryError(msg)
    # Surfaces PermissionError for an unreadable root.
    next(root.iterdir(), None)
    return root.resolve()


def _relative_to(path: str, root: Path) -> str:
    try:
        return Path(path).resolve().relative_to(root).as_posix()
    except ValueError:
        return path


def parse_file(file_path: Path, module: ModuleInfo) -> ParsedFile:
    """Parse one file into descriptors and an import table.

    Raises:
        FileParseError: If the file cannot be read, has syntax errors or
            declares no package.
    """
    source_bytes, tree = parse_go_file(file_path)
    root_node = tree.root_node

    package = package_name(source_bytes, root_node)
    if not package:
        raise FileParseError(str(file_path), "no package clause")

    resolved = file_path.resolve()
    rel_path = resolved.relative_to(module.root).as_posix()
    package_path = module.import_path_for(resolved.parent)

    return ParsedFile(
        path=str(file_path),
        rel_path=rel_path,
        package=package,
        package_path=package_path,
        import_table=build_import_table(source_bytes, root_node),
        descriptors=extract_functions(
            source_bytes,
            root_node,
            path=str(file_path),
            rel_path=rel_path,
            package=package,
            package_path=package_path,
        ),
    )


def _parse_file_or_error(
    file_path: Path, module: ModuleInfo
) -> ParsedFile | FileParseError:
    try:
        return parse_file(file_path, module)
    except FileParseError as exc:
        return exc


def build_index(
    root: Path,
    *,
    config: GoCallMapConfig | None = None,
    output_dir: str = "",
) -> IndexResult:
    """Index every Go source file under ``root``.

    Files are parsed on a thread pool (``config.workers``) and merged into
    the registry in sorted path order, so the first declaration of a
    duplicated identity is always the one from the lexicographically first
    file.

    Args:
        root: Directory to analyse; go.mod is searched from here upward
        config: Optional scanning configuration
        output_dir: Name of an artifacts directory inside root to skip

    Returns:
        IndexResult with the frozen registry.

    Raises:
        ManifestNotFound: If no go.mod is found.
        FileNotFoundError: If root does not exist.
        NotADirectoryError: If root is not a directory.
    """
    root = _check_root(root)
    module = find_module(root)

    files = list(
        find_go_files(
            root,
            output_dir=output_dir or (config.output_dir if config else ""),
            include_patterns=config.include if config else None,
            exclude_patterns=config.exclude if config else None,
            nested_gitignore=config.nested_gitignore if config else False,
            vendor_dir=config.vendor_dir if config else "vendor",
            include_tests=config.include_tests if config else False,
        )
    )
    workers = config.workers if config else 1

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(
                pool.map(lambda path: _parse_file_or_error(path, module), files)
            )
    else:
        results = [_parse_file_or_error(path, module) for path in files]

    builder = RegistryBuilder(module)
    import_tables: dict[str, ImportTable] = {}
    skipped: list[SkippedFile] = []

    for result in results:
        if isinstance(result, FileParseError):
            logger.warning("Skipping %s: %s", result.path, result.reason)
            skipped.append(
                SkippedFile(
                    path=_relative_to(result.path, module.root),
                    reason=result.reason,
                )
            )
            continue
        import_tables[result.path] = result.import_table
        builder.add_package(result.package_path, result.package)
        for descriptor in result.descriptors:
            builder.add(descriptor)

    registry = builder.freeze()
    logger.info(
        "Indexed %d functions from %d files (%d skipped) in module %s",
        len(registry),
        len(files) - len(skipped),
        len(skipped),
        module.module_path,
    )
    return IndexResult(
        registry=registry,
        module=module,
        import_tables=import_tables,
        skipped=tuple(skipped),
        file_count=len(files),
    )


def index_project(
    root: Path,
    *,
    config: GoCallMapConfig | None = None,
) -> tuple[FunctionRegistry, str]:
    """Index a project and return its registry and module path."""
    result = build_index(root, config=config)
    return result.registry, result.module_path


__all__ = [
    "IndexResult",
    "ParsedFile",
    "SkippedFile",
    "build_index",
    "index_project",
    "parse_file",
]
