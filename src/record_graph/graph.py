"""
Record Graph Construction

Turns detected tables into nodes (one per record), edges (one per resolved
foreign-key value) and groups (one per table).
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .inference import TableInfo, detect_tables

LABEL_MAX = 26
LABEL_KEEP = 24
ELLIPSIS = '…'

MIN_RADIUS = 4
RADIUS_PER_EDGE = 1.5
MAX_RADIUS_GROWTH = 16


def display_text(value: Any) -> str:
    """Render a scalar the way the browser page prints it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(',', ':'))
    return str(value)


def record_key(value: Any) -> str:
    """Normalise an id or foreign-key value so ``1``, ``1.0`` and ``"1"`` collide."""
    return display_text(value)


def truncate_label(text: str) -> str:
    if len(text) > LABEL_MAX:
        return text[:LABEL_KEEP] + ELLIPSIS
    return text


def node_radius(edge_count: int) -> float:
    """Radius grows linearly with connections, floored at 4 and capped at 20."""
    return MIN_RADIUS + min(edge_count * RADIUS_PER_EDGE, MAX_RADIUS_GROWTH)


@dataclass(eq=False)
class Node:
    id: str
    table: str
    record: Dict[str, Any]
    label: str
    color: str
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    radius: float = MIN_RADIUS
    degree: int = 0

    def __repr__(self) -> str:
        return f"Node({self.id!r})"


@dataclass(eq=False)
class Edge:
    source: Node
    target: Node
    fk: str

    def touches(self, node: Node) -> bool:
        return self.source is node or self.target is node


@dataclass(eq=False)
class Group:
    key: str
    label: str
    color: str
    nodes: List[Node] = field(default_factory=list)
    cx: float = 0.0
    cy: float = 0.0
    radius: float = 0.0

    @property
    def count(self) -> int:
        return len(self.nodes)


@dataclass
class Graph:
    tables: Dict[str, TableInfo]
    nodes: List[Node]
    edges: List[Edge]
    groups: Dict[str, Group]
    index: Dict[Tuple[str, str], Node]

    def find(self, table: str, record_id: Any) -> Optional[Node]:
        return self.index.get((table, record_key(record_id)))

    def stats(self) -> Dict[str, int]:
        return {
            'tables': sum(1 for t in self.tables.values() if t.count),
            'records': len(self.nodes),
            'relationships': len(self.edges),
        }


def build_graph(data: Dict[str, Any]) -> Graph:
    """
    Build the full node/edge/group set from a graph-data payload.

    The graph is always rebuilt from scratch. Records whose foreign-key value
    does not resolve to a node produce no edge.
    """
    tables = detect_tables(data)
    nodes = []
    edges = []
    groups = {}
    index = {}

    for key, table in tables.items():
        group = Group(key=key, label=table.label, color=table.color)
        groups[key] = group
        for rec in table.records:
            raw = rec.get(table.name_field)
            name = display_text(raw) if raw is not None else '#' + display_text(rec.get('id'))
            node = Node(
                id=f"{key}:{display_text(rec.get('id'))}",
                table=key,
                record=rec,
                label=truncate_label(name),
                color=table.color,
            )
            nodes.append(node)
            index[(key, record_key(rec.get('id')))] = node
            group.nodes.append(node)

    for key, table in tables.items():
        for fk in table.fk_fields:
            target_table = table.fk_targets.get(fk)
            if not target_table:
                continue
            for rec in table.records:
                value = rec.get(fk)
                if not value:
                    continue
                source = index.get((key, record_key(rec.get('id'))))
                target = index.get((target_table, record_key(value)))
                if source and target:
                    edges.append(Edge(source=source, target=target, fk=fk))

    for edge in edges:
        edge.source.degree += 1
        if edge.target is not edge.source:
            edge.target.degree += 1
    for node in nodes:
        node.radius = node_radius(node.degree)

    return Graph(tables=tables, nodes=nodes, edges=edges, groups=groups, index=index)
