"""Manifest and journey registry loading.

Both files are YAML; JSON is accepted too since it is a YAML subset.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from navgraph.models.manifest import JourneyRegistry, NavigationManifest
from navgraph.observability.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from navgraph.graph.models import Journey

log = get_logger(__name__)


class ManifestError(Exception):
    """Raised when a manifest or journey registry cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {path}: {reason}")


def _format_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into ``location: message`` lines."""
    lines = []
    for item in error.errors():
        loc = ".".join(str(part) for part in item["loc"]) or "(root)"
        lines.append(f"{loc}: {item['msg']}")
    return "; ".join(lines)


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ManifestError(path, "File not found")

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except (OSError, YAMLError) as e:
        raise ManifestError(path, str(e)) from e

    if data is None:
        raise ManifestError(path, "Empty file")
    if not isinstance(data, dict):
        raise ManifestError(path, f"Expected a mapping at top level, got {type(data).__name__}")
    return data


def load_manifest(path: Path) -> NavigationManifest:
    """Load and validate a navigation manifest.

    Args:
        path: Path to a YAML or JSON manifest.

    Returns:
        Validated NavigationManifest.

    Raises:
        ManifestError: If the file is missing, unparsable, or fails validation.
    """
    data = _read_yaml(path)
    try:
        manifest = NavigationManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(path, _format_validation_error(e)) from e

    log.debug(
        "manifest_loaded",
        path=str(path),
        routes=len(manifest.routes),
        links=len(manifest.links),
        journeys=len(manifest.journeys) if manifest.journeys is not None else None,
    )
    return manifest


def load_journey_registry(path: Path) -> list[Journey]:
    """Load journeys from a standalone registry file.

    The file holds a top-level ``journeys`` key in either the mapping or the
    list form accepted by manifests.

    Raises:
        ManifestError: If the file is missing, unparsable, or a journey is
            invalid (fewer than two steps, duplicate name).
    """
    data = _read_yaml(path)
    if "journeys" not in data:
        raise ManifestError(path, "Missing top-level 'journeys' key")
    try:
        registry = JourneyRegistry.model_validate(data)
    except ValidationError as e:
        raise ManifestError(path, _format_validation_error(e)) from e

    log.debug("journey_registry_loaded", path=str(path), journeys=len(registry.journeys))
    return registry.journey_list()
