"""
Force-Directed Layout

Fixed-budget physics pass over a built Graph. Tables are anchored around a
ring, records start on a spiral around their table's anchor, then a fixed
number of iterations apply same-table repulsion, edge springs and a pull
toward the anchor. There is no convergence test and no randomness, so the
same input always yields the same positions.
"""

import math
from dataclasses import dataclass
from typing import Dict, Tuple

from .graph import Graph


@dataclass
class LayoutParams:
    iterations: int = 120
    min_alpha: float = 0.01
    repulsion: float = 200.0
    repulsion_cutoff_sq: float = 10000.0
    spring_length: float = 80.0
    spring_strength: float = 0.003
    centering: float = 0.02
    damping: float = 0.8
    ring_scale: float = 0.55
    spiral_step: float = 2.4
    spiral_spacing: float = 12.0
    group_padding: float = 30.0


DEFAULT_PARAMS = LayoutParams()


def seed_positions(graph: Graph, width: float, height: float,
                   params: LayoutParams = DEFAULT_PARAMS) -> Dict[str, Tuple[float, float]]:
    """Place every node on its table's spiral; return each group's anchor."""
    keys = [k for k, g in graph.groups.items() if g.count > 0]
    ring = min(width, height) * params.ring_scale * 0.5
    anchors = {}

    for i, key in enumerate(keys):
        angle = (i / len(keys)) * math.pi * 2 - math.pi / 2
        gcx = width / 2 + math.cos(angle) * ring
        gcy = height / 2 + math.sin(angle) * ring
        group = graph.groups[key]
        for j, node in enumerate(group.nodes):
            spiral_angle = j * params.spiral_step
            spiral_r = math.sqrt(j) * params.spiral_spacing
            node.x = gcx + math.cos(spiral_angle) * spiral_r
            node.y = gcy + math.sin(spiral_angle) * spiral_r
            node.vx = node.vy = 0.0
        group.cx, group.cy = gcx, gcy
        anchors[key] = (gcx, gcy)

    return anchors


def _step(graph: Graph, anchors, alpha: float, params: LayoutParams):
    nodes = graph.nodes

    # Repulsion only within a table, and only at short range
    for i in range(len(nodes)):
        a = nodes[i]
        for j in range(i + 1, len(nodes)):
            b = nodes[j]
            if a.table != b.table:
                continue
            dx = b.x - a.x
            dy = b.y - a.y
            d2 = dx * dx + dy * dy
            if d2 > params.repulsion_cutoff_sq:
                continue
            d = math.sqrt(d2) or 1.0
            force = params.repulsion / (d * d) * alpha
            a.vx -= dx / d * force
            a.vy -= dy / d * force
            b.vx += dx / d * force
            b.vy += dy / d * force

    for edge in graph.edges:
        dx = edge.target.x - edge.source.x
        dy = edge.target.y - edge.source.y
        d = math.sqrt(dx * dx + dy * dy) or 1.0
        force = (d - params.spring_length) * params.spring_strength * alpha
        edge.source.vx += dx / d * force
        edge.source.vy += dy / d * force
        edge.target.vx -= dx / d * force
        edge.target.vy -= dy / d * force

    for key, (ax, ay) in anchors.items():
        for node in graph.groups[key].nodes:
            node.vx += (ax - node.x) * params.centering * alpha
            node.vy += (ay - node.y) * params.centering * alpha

    for node in nodes:
        node.vx *= params.damping
        node.vy *= params.damping
        node.x += node.vx
        node.y += node.vy


def fit_groups(graph: Graph, params: LayoutParams = DEFAULT_PARAMS):
    """Recompute each group's centroid and bounding radius from node positions."""
    for group in graph.groups.values():
        if not group.nodes:
            continue
        group.cx = sum(n.x for n in group.nodes) / len(group.nodes)
        group.cy = sum(n.y for n in group.nodes) / len(group.nodes)
        farthest = max(math.hypot(n.x - group.cx, n.y - group.cy) for n in group.nodes)
        group.radius = farthest + params.group_padding


def run_layout(graph: Graph, width: float = 1440, height: float = 900,
               params: LayoutParams = DEFAULT_PARAMS) -> Graph:
    """Seed, simulate and fit groups in place. Returns the same graph."""
    anchors = seed_positions(graph, width, height, params)
    for iteration in range(params.iterations):
        alpha = max(params.min_alpha, 1 - iteration / params.iterations)
        _step(graph, anchors, alpha, params)
    fit_groups(graph, params)
    return graph
