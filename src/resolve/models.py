"""Call-site model: a closed set of target kinds plus per-site metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Iterator

    from index.descriptors import ExternalOrigin

InvocationKind = Literal["direct", "defer", "go"]
CallKind = Literal["local", "cross_module", "method", "external", "literal"]


def is_stdlib_path(import_path: str) -> bool:
    """Standard-library import paths have no dot in their first element."""
    if not import_path:
        return False
    return "." not in import_path.split("/", 1)[0]


@dataclass(frozen=True)
class LocalCall:
    """Resolved call to a function of the caller's own package."""

    key: str

    kind: CallKind = field(default="local", init=False)


@dataclass(frozen=True)
class CrossModuleCall:
    """Resolved call into another package of the same module."""

    key: str
    import_path: str
    alias: str

    kind: CallKind = field(default="cross_module", init=False)


@dataclass(frozen=True)
class MethodCall:
    """Call through a value; the receiver expression is kept as text."""

    receiver: str
    name: str

    kind: CallKind = field(default="method", init=False)


@dataclass(frozen=True)
class ExternalCall:
    """Call that does not resolve to an indexed function."""

    name: str
    alias: str = ""
    import_path: str = ""
    origin: ExternalOrigin = "unknown"

    kind: CallKind = field(default="external", init=False)

    @property
    def is_stdlib(self) -> bool:
        return is_stdlib_path(self.import_path)


@dataclass(frozen=True)
class LiteralInvocation:
    """An immediately invoked ``func`` literal.

    ``column`` is the 1-based byte column of the ``func`` keyword; 0 when unknown.
    """

    column: int = 0

    kind: CallKind = field(default="literal", init=False)


CallTarget = (
    LocalCall | CrossModuleCall | MethodCall | ExternalCall | LiteralInvocation
)


@dataclass(frozen=True)
class CallSite:
    """One call expression inside a function body."""

    target: CallTarget
    line: int
    expr: str
    arguments: tuple[str, ...] = ()
    nested: tuple[CallSite, ...] = ()
    invocation: InvocationKind = "direct"

    @property
    def kind(self) -> CallKind:
        return self.target.kind

    def walk(self) -> Iterator[CallSite]:
        """Yield this site and every nested site, depth first."""
        yield self
        for child in self.nested:
            yield from child.walk()


def iter_call_sites(sites: list[CallSite]) -> Iterator[CallSite]:
    """Flatten a list of call sites including nested ones."""
    for site in sites:
        yield from site.walk()


__all__ = [
    "CallKind",
    "CallSite",
    "CallTarget",
    "CrossModuleCall",
    "ExternalCall",
    "InvocationKind",
    "LiteralInvocation",
    "LocalCall",
    "MethodCall",
    "is_stdlib_path",
    "iter_call_sites",
]
