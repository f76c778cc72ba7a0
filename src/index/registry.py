"""Function registry: a write-once builder and the frozen view it produces."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from index.descriptors import canonical_key

if TYPE_CHECKING:
    from index.descriptors import FunctionDescriptor
    from parse.manifest import ModuleInfo

logger = logging.getLogger(__name__)

# Go allows any number of these per package; they can never be called by name.
REPEATABLE_FUNCTIONS = frozenset({"init", "_"})


class RegistryFrozenError(RuntimeError):
    """Raised when a builder is written to after ``freeze()``."""


def _is_repeatable(descriptor: FunctionDescriptor) -> bool:
    return not descriptor.receiver and descriptor.name in REPEATABLE_FUNCTIONS


class RegistryBuilder:
    """Accumulates descriptors during indexing.

    The builder has a single writer. ``freeze()`` hands out the read-only
    ``FunctionRegistry`` and closes the builder, so resolution can only start
    once every declaration has been seen.
    """

    def __init__(self, module: ModuleInfo | None = None) -> None:
        self._module = module
        self._functions: dict[str, FunctionDescriptor] = {}
        self._package_names: dict[str, str] = {}
        self._collisions: list[str] = []
        self._repeated: list[str] = []
        self._frozen = False

    def add(self, descriptor: FunctionDescriptor) -> bool:
        """Insert a descriptor; a colliding identity keeps the first one seen."""
        if self._frozen:
            msg = "registry is frozen; indexing already finished"
            raise RegistryFrozenError(msg)

        key = descriptor.key
        existing = self._functions.get(key)
        if existing is not None and _is_repeatable(descriptor):
            logger.debug(
                "Additional %s at %s:%d; only the first declaration is indexed",
                key,
                descriptor.rel_path,
                descriptor.start_line,
            )
            self._repeated.append(key)
            return False
        if existing is not None:
            logger.warning(
                "Duplicate function identity %s at %s:%d (first declared at %s:%d); "
                "keeping the first declaration",
                key,
                descriptor.rel_path,
                descriptor.start_line,
                existing.rel_path,
                existing.start_line,
            )
            self._collisions.append(key)
            return False

        self._functions[key] = descriptor
        if descriptor.package_path:
            self._package_names.setdefault(descriptor.package_path, descriptor.package)
        return True

    def add_package(self, package_path: str, package: str) -> None:
        """Record the package name declared in an import-path directory."""
        if self._frozen:
            msg = "registry is frozen; indexing already finished"
            raise RegistryFrozenError(msg)
        self._package_names.setdefault(package_path, package)

    def __len__(self) -> int:
        return len(self._functions)

    def freeze(self) -> FunctionRegistry:
        self._frozen = True
        return FunctionRegistry(
            dict(self._functions),
            package_names=dict(self._package_names),
            module=self._module,
            collisions=tuple(self._collisions),
            repeated=tuple(self._repeated),
        )


class FunctionRegistry(Mapping[str, "FunctionDescriptor"]):
    """Read-only mapping of canonical identity -> descriptor."""

    def __init__(
        self,
        functions: dict[str, FunctionDescriptor],
        *,
        package_names: dict[str, str] | None = None,
        module: ModuleInfo | None = None,
        collisions: tuple[str, ...] = (),
        repeated: tuple[str, ...] = (),
    ) -> None:
        self._functions = MappingProxyType(functions)
        self._package_names = MappingProxyType(dict(package_names or {}))
        self.module = module
        self.collisions = collisions
        self.repeated = repeated

    @classmethod
    def from_descriptors(
        cls,
        descriptors: list[FunctionDescriptor],
        module: ModuleInfo | None = None,
    ) -> FunctionRegistry:
        builder = RegistryBuilder(module)
        for descriptor in descriptors:
            builder.add(descriptor)
        return builder.freeze()

    def __getitem__(self, key: str) -> FunctionDescriptor:
        return self._functions[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    @property
    def module_path(self) -> str:
        return self.module.module_path if self.module is not None else ""

    def package_name_for(self, import_path: str) -> str | None:
        """Package name indexed for an import path, if any file declared it."""
        return self._package_names.get(import_path)

    def lookup(
        self, package: str, name: str, receiver: str = ""
    ) -> FunctionDescriptor | None:
        return self._functions.get(canonical_key(package, receiver, name))

    def by_file(self) -> dict[str, list[FunctionDescriptor]]:
        """Group descriptors by file path, each group in declaration order."""
        grouped: dict[str, list[FunctionDescriptor]] = {}
        for descriptor in self._functions.values():
            grouped.setdefault(descriptor.path, []).append(descriptor)
        for descriptors in grouped.values():
            descriptors.sort(key=lambda d: d.start_line)
        return dict(sorted(grouped.items()))


__all__ = [
    "REPEATABLE_FUNCTIONS",
    "FunctionRegistry",
    "RegistryBuilder",
    "RegistryFrozenError",
]
