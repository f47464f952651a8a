"""
Type Graph Domain Models

Node/link records of the type cross-reference graph, the scan mode policy and
the module unit handed to the builder.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Dense, zero-based identity assigned per fully-qualified type name
TypeIdentity = int


class LinkKind(str, Enum):
    """Kind of a directed edge between two types."""

    REFERENCE = "Reference"
    INHERITANCE = "Inheritance"


class ScanMode(str, Enum):
    """Which link kinds the link discovery phase produces."""

    FULL = "full"
    REFERENCE = "reference"
    INHERITANCE = "inheritance"

    @classmethod
    def from_string(cls, value: str) -> "ScanMode":
        """
        Parse a mode name or one of the short switches.

        Accepts "full"/"reference"/"inheritance" (any case) and the
        single-letter forms "f"/"r"/"i", with or without a leading "/" or "-".
        """
        normalized = value.strip().lower().lstrip("/-")
        for mode in cls:
            if normalized in (mode.value, mode.value[0]):
                return mode
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Invalid scan mode '{value}'. Valid options: {valid}")

    @property
    def scans_references(self) -> bool:
        return self in (ScanMode.FULL, ScanMode.REFERENCE)

    @property
    def scans_inheritance(self) -> bool:
        return self in (ScanMode.FULL, ScanMode.INHERITANCE)


class _ArtifactModel(BaseModel):
    """Frozen record serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TypeNode(_ArtifactModel):
    """One declared named type."""

    id: TypeIdentity
    name: str
    short_name: str
    project: str = ""
    file_path: str = ""

    @classmethod
    def create(
        cls,
        id: TypeIdentity,
        name: str,
        short_name: str,
        project: str,
        file_path: str,
    ) -> "TypeNode":
        """Build a node, normalizing a non-empty file path to an absolute one."""
        resolved = str(Path(file_path).resolve()) if file_path and file_path.strip() else ""
        return cls(
            id=id,
            name=name,
            short_name=short_name or name,
            project=project or "",
            file_path=resolved,
        )


class TypeLink(_ArtifactModel):
    """Directed, kind-tagged edge between two node identities."""

    source: TypeIdentity
    target: TypeIdentity
    link_type: LinkKind = LinkKind.REFERENCE

    @property
    def key(self) -> tuple[TypeIdentity, TypeIdentity, LinkKind]:
        return (self.source, self.target, self.link_type)


class GraphSnapshot(_ArtifactModel):
    """Nodes and links of one run, both in insertion order."""

    nodes: list[TypeNode]
    links: list[TypeLink]

    def stats(self) -> dict[str, int]:
        return {
            "nodes": len(self.nodes),
            "links": len(self.links),
            "reference_links": sum(1 for link in self.links if link.link_type == LinkKind.REFERENCE),
            "inheritance_links": sum(1 for link in self.links if link.link_type == LinkKind.INHERITANCE),
        }


@dataclass
class ModuleUnit:
    """
    A compilable unit (project) analyzed with one resolver context.

    source_units are opaque to the graph builder; only the resolver that
    produced them knows their shape.
    """

    name: str
    source_root: Path
    source_units: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.source_units)
