"""Data types for GridFlow diagrams.

This module contains the core data structures used throughout the
GridFlow editor: placed nodes, the edges between them, the decoded
placement requests and the connection workflow state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class ActivityKind(Enum):
    """Supported activity node types."""

    START = "Start"
    STOP = "Stop"
    SEQUENCE = "Sequence"
    RECV = "Recv"

    @classmethod
    def parse(cls, value: object) -> Optional["ActivityKind"]:
        """Return the kind matching ``value`` (enum value or name), or None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value:
            return None
        try:
            return cls(value)
        except ValueError:
            pass
        return cls.__members__.get(value.upper())


@dataclass
class Node:
    """An activity placed on a grid cell."""

    id: int
    kind: ActivityKind
    col: int
    row: int

    @property
    def cell(self) -> tuple:
        return (self.col, self.row)


@dataclass(frozen=True)
class Edge:
    """A directed connection between two nodes."""

    from_id: int
    to_id: int

    def touches(self, node_id: int) -> bool:
        return self.from_id == node_id or self.to_id == node_id


@dataclass(frozen=True)
class Point:
    """A pixel position on the canvas surface."""

    x: float
    y: float


# --- Placement requests -----------------------------------------------------
@dataclass(frozen=True)
class FromPalette:
    """Drop of a palette tile: always creates a new node."""

    kind: ActivityKind
    target_col: int
    target_row: int


@dataclass(frozen=True)
class FromCanvas:
    """Drop of an existing node: relocates it."""

    node_id: int
    target_col: int
    target_row: int


PlacementRequest = Union[FromPalette, FromCanvas]


@dataclass
class PlacementResult:
    """Outcome of an applied placement request."""

    node: Node
    evicted: Optional[Node] = None
    removed_edges: List[Edge] = field(default_factory=list)


# --- Connection workflow ----------------------------------------------------
@dataclass(frozen=True)
class Idle:
    """No connection in progress."""


@dataclass(frozen=True)
class Armed:
    """A source node was chosen and waits for a target click."""

    source_id: int
    preview_point: Optional[Point] = None


ConnectionState = Union[Idle, Armed]

IDLE = Idle()


@dataclass(frozen=True)
class ConnectionPreview:
    """Pending edge as the renderer draws it."""

    source_id: int
    preview_point: Optional[Point]
