"""Parsing utilities for Go sources and module manifests."""

from parse.go_functions import extract_functions
from parse.go_imports import build_import_table, default_alias
from parse.go_parser import package_name, parse_go_file, parse_source
from parse.manifest import ModuleInfo, find_module, parse_module_path

__all__ = [
    "ModuleInfo",
    "build_import_table",
    "default_alias",
    "extract_functions",
    "find_module",
    "package_name",
    "parse_go_file",
    "parse_module_path",
    "parse_source",
]
