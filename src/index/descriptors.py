"""In-memory function descriptors and canonical identities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from resolve.models import CallSite

ExternalOrigin = Literal["unknown", "imported", "missing"]


def canonical_key(package: str, receiver: str, name: str) -> str:
    """Build the registry key of a function or method.

    Examples:
        >>> canonical_key("main", "", "A")
        'main.A'
        >>> canonical_key("x", "Worker", "Run")
        'x/Worker.Run'
    """
    if receiver:
        return f"{package}/{receiver}.{name}"
    return f"{package}.{name}"


def normalize_receiver(type_text: str) -> str:
    """Reduce a receiver type to its base type name.

    Pointer and value receivers share an identity, and type parameters are
    dropped.

    Examples:
        >>> normalize_receiver("*Stack[T]")
        'Stack'
        >>> normalize_receiver("(Worker)")
        'Worker'
    """
    text = type_text.strip()
    while text.startswith(("*", "(")) or text.endswith(")"):
        text = text.lstrip("*(").rstrip(")").strip()
    return text.split("[", 1)[0].strip()


@dataclass(frozen=True)
class Parameter:
    """One declared parameter; ``name`` is empty for unnamed parameters."""

    name: str
    type: str

    def render(self) -> str:
        return f"{self.name} {self.type}" if self.name else self.type


@dataclass(frozen=True)
class ExternalReference:
    """A call target outside the indexed functions."""

    name: str
    alias: str = ""
    import_path: str = ""
    origin: ExternalOrigin = "unknown"

    def render(self) -> str:
        qualifier = self.import_path or self.alias
        return f"{qualifier}.{self.name}" if qualifier else self.name


@dataclass
class FunctionDescriptor:
    """A declared Go function or method.

    Identity and location are fixed at indexing time. ``calls`` and
    ``externals`` are filled in after call resolution.
    """

    package: str
    receiver: str
    name: str
    path: str
    rel_path: str
    start_line: int
    end_line: int
    package_path: str = ""
    parameters: list[Parameter] = field(default_factory=list)
    returns: list[str] = field(default_factory=list)
    has_body: bool = True
    calls: list[CallSite] = field(default_factory=list)
    externals: list[ExternalReference] = field(default_factory=list)

    @property
    def key(self) -> str:
        return canonical_key(self.package, self.receiver, self.name)

    @property
    def display_name(self) -> str:
        return f"{self.receiver}.{self.name}" if self.receiver else self.name


__all__ = [
    "ExternalOrigin",
    "ExternalReference",
    "FunctionDescriptor",
    "Parameter",
    "canonical_key",
    "normalize_receiver",
]
