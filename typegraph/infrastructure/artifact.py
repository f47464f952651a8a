"""
Graph Artifact I/O

JSON document with two ordered collections:

    {
      "nodes": [{"id": 0, "name": "app.models.User", "shortName": "User",
                 "project": "app", "filePath": "/repo/app/models.py"}],
      "links": [{"source": 1, "target": 0, "linkType": "Reference"}]
    }
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from typegraph.domain.models import GraphSnapshot, ScanMode
from typegraph.infrastructure.exceptions import ArtifactReadError, ArtifactWriteError
from typegraph.infrastructure.logging import get_logger

logger = get_logger(__name__)

ARTIFACT_SUFFIX = "dependency-graph.json"


def artifact_path(input_path: str | Path, mode: ScanMode, output_dir: str | Path = ".") -> Path:
    """
    Where the artifact of a run goes.

    Example:
        artifact_path("repo/app", ScanMode.FULL, "out") -> out/app.full.dependency-graph.json
    """
    base_name = Path(input_path).name or Path(input_path).resolve().name
    return Path(output_dir) / f"{base_name}.{mode.value}.{ARTIFACT_SUFFIX}"


class JsonArtifactWriter:
    """ArtifactWriterPort writing camelCase JSON."""

    def __init__(self, indent: int | None = 2):
        self.indent = indent or None

    def render(self, snapshot: GraphSnapshot) -> str:
        return snapshot.model_dump_json(by_alias=True, indent=self.indent)

    def write(self, snapshot: GraphSnapshot, path: Path) -> Path:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.render(snapshot) + "\n", encoding="utf-8")
        except OSError as e:
            raise ArtifactWriteError(str(path), str(e)) from e

        logger.info("artifact_written", path=str(path), nodes=len(snapshot.nodes), links=len(snapshot.links))
        return path


def read_artifact(path: str | Path) -> GraphSnapshot:
    """Load and validate an artifact written by JsonArtifactWriter."""
    path = Path(path)
    try:
        return GraphSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ArtifactReadError(str(path), str(e)) from e
    except ValidationError as e:
        raise ArtifactReadError(str(path), f"{e.error_count()} validation error(s)") from e
