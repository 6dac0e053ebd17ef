"""
Viewport & Interaction State

ViewState owns everything the renderer and the input handlers share: the
camera (pan + zoom), the interaction mode, hover, the legend filter and the
search term. Handlers mutate it and report whether a redraw is needed, so
hit-testing and camera behaviour can be exercised without a drawing surface.

Modes:
    idle       -> dragging   on pointer_down
    dragging   -> idle       on pointer_up (may start a zoom-to-group)
    any        -> animating  on fit_all / zoom_to_group
    animating  -> idle       once the camera reaches its target
"""

import json
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .graph import Graph, Group, Node

IDLE = 'idle'
DRAGGING = 'dragging'
ANIMATING = 'animating'

# Fields never shown in the tooltip
HIDDEN_FIELDS = ('embedding', 'metadata', 'config', 'token')

FIT_KEYS = ('f', 'F')
RESET_KEY = 'Escape'


@dataclass
class AnimationTarget:
    pan_x: float
    pan_y: float
    zoom: float
    t: float = 0.0


@dataclass
class LegendEntry:
    key: str
    label: str
    color: str
    count: int
    active: bool = False
    dimmed: bool = False


@dataclass
class Tooltip:
    type_label: str
    color: str
    name: str
    fields: List[Tuple[str, str]] = field(default_factory=list)
    connections: int = 0
    left: float = 0.0
    top: float = 0.0


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return 1 - math.pow(-2 * t + 2, 3) / 2


def tooltip_value(value) -> str:
    if value is None:
        return '∅'
    if isinstance(value, str):
        return value[:48] + '…' if len(value) > 50 else value
    return json.dumps(value, separators=(',', ':'))


class ViewState:
    """Camera and interaction state for one rendered graph."""

    min_zoom = 0.08
    max_zoom = 8.0
    zoom_in_factor = 1.12
    zoom_out_factor = 0.89
    click_threshold = 3
    group_hit_radius = 60
    hover_scale = 1.5
    anim_step = 0.06
    anim_rate = 0.15
    pan_epsilon = 0.5
    zoom_epsilon = 0.001

    # Class attributes that may be overridden per instance
    TUNABLES = (
        'min_zoom', 'max_zoom', 'zoom_in_factor', 'zoom_out_factor', 'click_threshold',
        'group_hit_radius', 'hover_scale', 'anim_step', 'anim_rate', 'pan_epsilon',
        'zoom_epsilon',
    )

    def __init__(self, graph: Graph, width: float = 1440, height: float = 900, **overrides):
        for name, value in overrides.items():
            if name not in self.TUNABLES:
                raise TypeError(f"Unknown view setting: {name}")
            setattr(self, name, value)
        self.graph = graph
        self.width = width
        self.height = height
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.zoom = 1.0
        self.mode = IDLE
        self.drag_start = (0.0, 0.0)
        self.pan_start = (0.0, 0.0)
        self.hovered: Optional[Node] = None
        self.active_filter: Optional[str] = None
        self.search_term = ''
        self.anim: Optional[AnimationTarget] = None

    # -- coordinates -------------------------------------------------------

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.pan_x) / self.zoom, (sy - self.pan_y) / self.zoom

    def world_to_screen(self, wx: float, wy: float) -> Tuple[float, float]:
        return wx * self.zoom + self.pan_x, wy * self.zoom + self.pan_y

    # -- visibility & hit-testing -----------------------------------------

    def is_visible(self, node: Node) -> bool:
        if self.active_filter and node.table != self.active_filter:
            return False
        if self.search_term:
            term = self.search_term
            if term not in node.label.lower() and term not in node.table.lower():
                return False
        return True

    def node_at(self, sx: float, sy: float) -> Optional[Node]:
        """Nearest visible node under a screen point."""
        wx, wy = self.screen_to_world(sx, sy)
        best = None
        best_d = math.inf
        for node in self.graph.nodes:
            if not self.is_visible(node):
                continue
            d = math.hypot(wx - node.x, wy - node.y)
            if d < node.radius * self.hover_scale and d < best_d:
                best, best_d = node, d
        return best

    def group_label_position(self, group: Group) -> Tuple[float, float]:
        return group.cx, group.cy - group.radius - 8 / self.zoom

    def group_at(self, sx: float, sy: float) -> Optional[str]:
        """Key of the group whose label is under a screen point."""
        wx, wy = self.screen_to_world(sx, sy)
        best = None
        best_d = math.inf
        for key, group in self.graph.groups.items():
            if not group.nodes:
                continue
            lx, ly = self.group_label_position(group)
            d = math.hypot(wx - lx, wy - ly)
            if d < self.group_hit_radius / self.zoom and d < best_d:
                best, best_d = key, d
        return best

    # -- pointer -----------------------------------------------------------

    def pointer_down(self, x: float, y: float):
        self.mode = DRAGGING
        self.anim = None
        self.drag_start = (x, y)
        self.pan_start = (self.pan_x, self.pan_y)

    def pointer_move(self, x: float, y: float) -> bool:
        """Pan while dragging, otherwise update hover. Returns True when a redraw is needed."""
        if self.mode == DRAGGING:
            self.pan_x = self.pan_start[0] + (x - self.drag_start[0])
            self.pan_y = self.pan_start[1] + (y - self.drag_start[1])
            return True
        node = self.node_at(x, y)
        if node is not self.hovered:
            self.hovered = node
            return True
        return False

    def pointer_up(self, x: float, y: float) -> Optional[str]:
        """End a drag. A release that barely moved on a group label zooms to it."""
        if self.mode != DRAGGING:
            return None
        self.mode = IDLE
        moved_x = abs(x - self.drag_start[0])
        moved_y = abs(y - self.drag_start[1])
        if moved_x < self.click_threshold and moved_y < self.click_threshold:
            key = self.group_at(x, y)
            if key:
                self.zoom_to_group(key)
                return key
        return None

    def double_click(self):
        self.fit_all()

    def wheel(self, x: float, y: float, delta_y: float):
        """Zoom one notch around the cursor, clamped to [min_zoom, max_zoom]."""
        factor = self.zoom_in_factor if delta_y < 0 else self.zoom_out_factor
        new_zoom = max(self.min_zoom, min(self.max_zoom, self.zoom * factor))
        applied = new_zoom / self.zoom
        self.pan_x = x - (x - self.pan_x) * applied
        self.pan_y = y - (y - self.pan_y) * applied
        self.zoom = new_zoom

    # -- legend, search, keys ---------------------------------------------

    def toggle_filter(self, key: str):
        self.active_filter = None if self.active_filter == key else key
        self._drop_hidden_hover()

    def set_search(self, text: str):
        self.search_term = text.lower()
        self._drop_hidden_hover()

    def reset(self):
        self.active_filter = None
        self.search_term = ''
        self.hovered = None

    def key_press(self, key: str, in_search: bool = False) -> bool:
        if key == RESET_KEY:
            self.reset()
            return True
        if key in FIT_KEYS and not in_search:
            self.fit_all()
            return True
        return False

    def _drop_hidden_hover(self):
        if self.hovered is not None and not self.is_visible(self.hovered):
            self.hovered = None

    def legend_entries(self) -> List[LegendEntry]:
        entries = []
        for key, table in self.graph.tables.items():
            if not table.count:
                continue
            entries.append(LegendEntry(
                key=key,
                label=table.label,
                color=table.color,
                count=table.count,
                active=self.active_filter == key,
                dimmed=self.active_filter is not None and self.active_filter != key,
            ))
        return entries

    # -- camera animation --------------------------------------------------

    def _animate_to(self, pan_x: float, pan_y: float, zoom: float):
        self.anim = AnimationTarget(pan_x=pan_x, pan_y=pan_y, zoom=zoom)
        self.mode = ANIMATING

    def fit_all(self) -> Optional[AnimationTarget]:
        """Animate so every node fits in the viewport."""
        nodes = self.graph.nodes
        if not nodes:
            return None
        min_x = min(n.x for n in nodes)
        max_x = max(n.x for n in nodes)
        min_y = min(n.y for n in nodes)
        max_y = max(n.y for n in nodes)
        bw = max_x - min_x + 100
        bh = max_y - min_y + 100
        tz = min(self.width / bw, self.height / bh) * 0.82
        cx = (min_x + max_x) / 2
        cy = (min_y + max_y) / 2
        self._animate_to(self.width / 2 - cx * tz, self.height / 2 - cy * tz, tz)
        return self.anim

    def zoom_to_group(self, key: str) -> Optional[AnimationTarget]:
        group = self.graph.groups.get(key)
        if group is None or not group.nodes:
            return None
        tz = min(4.0, min(self.width, self.height) / (max(group.radius, 1e-6) * 2.5))
        self._animate_to(self.width / 2 - group.cx * tz, self.height / 2 - group.cy * tz, tz)
        return self.anim

    def animate_frame(self) -> bool:
        """Advance the camera one frame toward its target. Returns True while still moving."""
        target = self.anim
        if target is None:
            return False
        target.t += self.anim_step
        rate = ease_in_out_cubic(min(1.0, target.t)) * self.anim_rate
        self.pan_x += (target.pan_x - self.pan_x) * rate
        self.pan_y += (target.pan_y - self.pan_y) * rate
        self.zoom += (target.zoom - self.zoom) * rate

        settled = (
            target.t >= 1
            and abs(target.pan_x - self.pan_x) < self.pan_epsilon
            and abs(target.pan_y - self.pan_y) < self.pan_epsilon
            and abs(target.zoom - self.zoom) < self.zoom_epsilon
        )
        if settled:
            self.pan_x, self.pan_y, self.zoom = target.pan_x, target.pan_y, target.zoom
            self.anim = None
            self.mode = IDLE
            return False
        return True

    def finish_animation(self, max_frames: int = 10000) -> int:
        """Run frames until the camera settles. Returns the number of frames used."""
        frames = 0
        while self.animate_frame():
            frames += 1
            if frames >= max_frames:
                target = self.anim
                self.pan_x, self.pan_y, self.zoom = target.pan_x, target.pan_y, target.zoom
                self.anim = None
                self.mode = IDLE
                break
        return frames

    # -- tooltip -----------------------------------------------------------

    def tooltip(self, node: Node, x: float, y: float) -> Tooltip:
        table = self.graph.tables[node.table]
        fields = [
            (k, tooltip_value(v)) for k, v in node.record.items() if k not in HIDDEN_FIELDS
        ]
        return Tooltip(
            type_label=table.label,
            color=table.color,
            name=node.label,
            fields=fields,
            connections=node.degree,
            left=min(x + 16, self.width - 400),
            top=min(y + 16, self.height - 300),
        )

    def status_line(self) -> str:
        stats = self.graph.stats()
        return (
            f"{stats['tables']} tables · {stats['records']} records · "
            f"{stats['relationships']} relationships · zoom {self.zoom:.2f}x"
        )
