"""Navigation manifest schema.

A manifest is the declarative hand-off from a route extractor (or a human)
to the engine: routes, links, entry points, allowed terminals and optional
journeys. These models validate the raw YAML/JSON structure and convert it
into engine records.

Accepted shorthands:
- a route may be a bare path string
- a link may be a two-item ``[from, to]`` list
- journeys may be a mapping of name to steps, or a list of ``{name, steps}``
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from navgraph.graph.models import Journey, LinkEdge, LinkKind, RouteKind, RouteNode
from navgraph.graph.reachability import DEFAULT_ENTRY_POINTS, DEFAULT_TERMINALS

# [id], [...slug], [[...slug]], :id, {id}
_PARAM_SEGMENT = re.compile(r"\[[^\]/]+\]|(?:^|/):[^/]+|\{[^}/]+\}")
_DEFAULTED_LISTS = frozenset({"entry_points", "terminals"})


def infer_route_kind(path: str) -> RouteKind:
    """Classify a path as dynamic when it contains a parameter segment."""
    return RouteKind.DYNAMIC if _PARAM_SEGMENT.search(path) else RouteKind.STATIC


class RouteSpec(BaseModel):
    """A declared route. ``kind`` is inferred from the path when omitted."""

    path: str = Field(min_length=1)
    source_ref: str = ""
    kind: RouteKind | None = None

    @model_validator(mode="before")
    @classmethod
    def accept_bare_path(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"path": data}
        return data

    @model_validator(mode="after")
    def fill_kind(self) -> RouteSpec:
        if self.kind is None:
            self.kind = infer_route_kind(self.path)
        return self

    def to_node(self) -> RouteNode:
        return RouteNode(
            path=self.path,
            source_ref=self.source_ref,
            kind=self.kind or infer_route_kind(self.path),
        )


class LinkSpec(BaseModel):
    """A declared link. Serialized with ``from``/``to`` keys."""

    model_config = ConfigDict(populate_by_name=True)

    from_path: str = Field(alias="from", min_length=1)
    to_path: str = Field(alias="to", min_length=1)
    kind: LinkKind = LinkKind.NAVIGATIONAL

    @model_validator(mode="before")
    @classmethod
    def accept_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                msg = f"link shorthand must be [from, to], got {len(data)} item(s)"
                raise ValueError(msg)
            return {"from": data[0], "to": data[1]}
        return data

    def to_edge(self) -> LinkEdge:
        return LinkEdge(from_path=self.from_path, to_path=self.to_path, kind=self.kind)


class JourneySpec(BaseModel):
    """A named user flow. Single-step journeys are rejected here."""

    name: str = Field(min_length=1)
    steps: list[str] = Field(min_length=2)

    def to_journey(self) -> Journey:
        return Journey(name=self.name, steps=tuple(self.steps))


def _normalize_journeys(value: Any) -> Any:
    """Turn the ``name: [steps]`` mapping form into a list of JourneySpec dicts."""
    if isinstance(value, dict):
        return [{"name": name, "steps": steps} for name, steps in value.items()]
    return value


def _check_unique_names(journeys: list[JourneySpec]) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for journey in journeys:
        if journey.name in seen:
            duplicates.append(journey.name)
        seen.add(journey.name)
    if duplicates:
        msg = f"duplicate journey name(s): {sorted(set(duplicates))}"
        raise ValueError(msg)


class JourneyRegistry(BaseModel):
    """A standalone journey registry file."""

    journeys: list[JourneySpec] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        if isinstance(data, dict) and "journeys" in data:
            return {**data, "journeys": _normalize_journeys(data["journeys"])}
        return data

    @model_validator(mode="after")
    def unique_names(self) -> JourneyRegistry:
        _check_unique_names(self.journeys)
        return self

    def journey_list(self) -> list[Journey]:
        return [j.to_journey() for j in self.journeys]


class NavigationManifest(BaseModel):
    """Routes, links and analysis settings for one site or app.

    ``journeys`` is None when the manifest declares none, which turns journey
    validation off. An explicit empty list validates zero journeys.
    """

    routes: list[RouteSpec] = Field(default_factory=list)
    links: list[LinkSpec] = Field(default_factory=list)
    entry_points: list[str] = Field(default_factory=lambda: sorted(DEFAULT_ENTRY_POINTS))
    terminals: list[str] = Field(default_factory=lambda: sorted(DEFAULT_TERMINALS))
    journeys: list[JourneySpec] | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        # An empty YAML key (``terminals:``) means "use the defaults".
        data = {k: v for k, v in data.items() if not (k in _DEFAULTED_LISTS and v is None)}
        if data.get("journeys") is not None:
            data["journeys"] = _normalize_journeys(data["journeys"])
        return data

    @model_validator(mode="after")
    def unique_journey_names(self) -> NavigationManifest:
        if self.journeys:
            _check_unique_names(self.journeys)
        return self

    def to_engine_inputs(self) -> tuple[list[RouteNode], list[LinkEdge]]:
        """Convert to the route and link lists the engine consumes."""
        return [r.to_node() for r in self.routes], [link.to_edge() for link in self.links]

    def journey_list(self) -> list[Journey] | None:
        if self.journeys is None:
            return None
        return [j.to_journey() for j in self.journeys]
