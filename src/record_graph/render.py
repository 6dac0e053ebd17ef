"""
Frame Rendering

draw_frame() paints one frame of a ViewState onto any Canvas. Coordinates
handed to the canvas are already in screen space; line widths and font sizes
are in screen pixels, so strokes keep a constant width at every zoom level.

SvgCanvas is the bundled surface, used for static snapshots.
"""

import html
import math
from typing import List, Optional, Sequence, Tuple

from .viewport import ViewState

BACKGROUND = '#06060b'
HIGHLIGHT = 'rgba(167,139,250,0.7)'

GRID_STEP = 80
GRID_MIN_ZOOM = 0.3
LABEL_MIN_ZOOM = 0.6
DETAIL_MIN_ZOOM = 1.5


class Canvas:
    """Drawing surface used by draw_frame."""

    def clear(self, width: float, height: float):
        raise NotImplementedError

    def line(self, x1, y1, x2, y2, color: str, width: float = 1.0, alpha: float = 1.0,
             dash: Optional[Sequence[float]] = None):
        raise NotImplementedError

    def circle(self, x, y, r, fill: Optional[str] = None, stroke: Optional[str] = None,
               width: float = 1.0, alpha: float = 1.0, dash: Optional[Sequence[float]] = None):
        raise NotImplementedError

    def glow(self, x, y, r, stops: Sequence[Tuple[float, str]], alpha: float = 1.0):
        """Filled circle with a radial gradient from the centre outwards."""
        raise NotImplementedError

    def text(self, x, y, text: str, size: float, color: str, weight: int = 400,
             alpha: float = 1.0, anchor: str = 'middle'):
        raise NotImplementedError


def draw_grid(state: ViewState, canvas: Canvas):
    alpha = min(0.03, 0.01 * state.zoom)
    color = f'rgba(255,255,255,{alpha:.4f})'
    left, top = state.screen_to_world(0, 0)
    right, bottom = state.screen_to_world(state.width, state.height)
    sx = math.floor(left / GRID_STEP) * GRID_STEP
    ex = math.ceil(right / GRID_STEP) * GRID_STEP
    sy = math.floor(top / GRID_STEP) * GRID_STEP
    ey = math.ceil(bottom / GRID_STEP) * GRID_STEP

    x = sx
    while x <= ex:
        x1, y1 = state.world_to_screen(x, sy)
        x2, y2 = state.world_to_screen(x, ey)
        canvas.line(x1, y1, x2, y2, color, 0.5)
        x += GRID_STEP
    y = sy
    while y <= ey:
        x1, y1 = state.world_to_screen(sx, y)
        x2, y2 = state.world_to_screen(ex, y)
        canvas.line(x1, y1, x2, y2, color, 0.5)
        y += GRID_STEP


def draw_groups(state: ViewState, canvas: Canvas):
    z = state.zoom
    for key, group in state.graph.groups.items():
        if not group.nodes:
            continue
        dimmed = bool(state.active_filter) and state.active_filter != key
        cx, cy = state.world_to_screen(group.cx, group.cy)
        canvas.glow(cx, cy, group.radius * 1.3 * z, [
            (0, group.color + ('05' if dimmed else '12')),
            (0.7, group.color + ('03' if dimmed else '08')),
            (1, 'transparent'),
        ])
        canvas.circle(cx, cy, group.radius * z, stroke=group.color + ('10' if dimmed else '25'),
                      width=1.5, dash=(4, 4))
        font_size = max(10, min(18, 14 / z)) * z
        lx, ly = state.world_to_screen(*state.group_label_position(group))
        canvas.text(lx, ly, f'{group.label} ({group.count})', font_size,
                    group.color + ('40' if dimmed else 'cc'), weight=700)


def draw_edges(state: ViewState, canvas: Canvas):
    hovered = state.hovered
    for edge in state.graph.edges:
        sv = state.is_visible(edge.source)
        tv = state.is_visible(edge.target)
        if not sv and not tv:
            continue
        highlighted = hovered is not None and edge.touches(hovered)
        x1, y1 = state.world_to_screen(edge.source.x, edge.source.y)
        x2, y2 = state.world_to_screen(edge.target.x, edge.target.y)

        if highlighted:
            canvas.line(x1, y1, x2, y2, HIGHLIGHT, 2)
            angle = math.atan2(y2 - y1, x2 - x1)
            mx, my = (x1 + x2) / 2, (y1 + y2) / 2
            for spread in (-0.4, 0.4):
                canvas.line(mx, my, mx - 6 * math.cos(angle + spread),
                            my - 6 * math.sin(angle + spread), HIGHLIGHT, 2)
        elif edge.source.table == edge.target.table:
            alpha = 0.06 if sv and tv else 0.02
            canvas.line(x1, y1, x2, y2, f'rgba(255,255,255,{alpha})', 0.5)
        else:
            canvas.line(x1, y1, x2, y2, edge.source.color + ('30' if sv and tv else '10'), 1)


def node_alpha(visible: bool, is_hovered: bool, connected: bool, anything_hovered: bool) -> float:
    if not visible:
        return 0.03
    if is_hovered:
        return 1.0
    if anything_hovered:
        return 0.9 if connected else 0.08
    return 0.85


def draw_nodes(state: ViewState, canvas: Canvas):
    z = state.zoom
    hovered = state.hovered
    neighbours = set()
    if hovered is not None:
        for edge in state.graph.edges:
            if edge.source is hovered:
                neighbours.add(id(edge.target))
            elif edge.target is hovered:
                neighbours.add(id(edge.source))
    show_labels = z > LABEL_MIN_ZOOM
    show_details = z > DETAIL_MIN_ZOOM

    for node in state.graph.nodes:
        visible = state.is_visible(node)
        is_hovered = node is hovered
        connected = id(node) in neighbours
        alpha = node_alpha(visible, is_hovered, connected, hovered is not None)
        x, y = state.world_to_screen(node.x, node.y)
        r = node.radius * z

        if is_hovered or connected:
            canvas.glow(x, y, r * 3, [(0, node.color + '30'), (1, 'transparent')], alpha=alpha)
        canvas.circle(x, y, r, fill=node.color + ('ee' if is_hovered else '77'),
                      stroke=node.color + ('ff' if is_hovered else '44'),
                      width=2 if is_hovered else 0.5, alpha=alpha)

        if show_labels and (is_hovered or connected or node.radius > 10 or show_details):
            color = '#fff' if is_hovered else ('#ddd' if connected else '#888')
            canvas.text(x, y - (node.radius + 3) * z, node.label, 9 * z, color,
                        weight=600 if is_hovered else 400, alpha=alpha)


def draw_frame(state: ViewState, canvas: Canvas) -> str:
    """Paint one frame. Returns the status line for the on-screen summary."""
    canvas.clear(state.width, state.height)
    if state.zoom > GRID_MIN_ZOOM:
        draw_grid(state, canvas)
    draw_groups(state, canvas)
    draw_edges(state, canvas)
    draw_nodes(state, canvas)
    return state.status_line()


def _fmt(value: float) -> str:
    return f'{value:.2f}'.rstrip('0').rstrip('.')


class SvgCanvas(Canvas):
    """Canvas that accumulates SVG elements."""

    def __init__(self, font_family: str = 'Inter, sans-serif'):
        self.font_family = font_family
        self.width = 0
        self.height = 0
        self.defs: List[str] = []
        self.elements: List[str] = []

    def clear(self, width, height):
        self.width = width
        self.height = height
        self.defs = []
        self.elements = [
            f'<rect x="0" y="0" width="{_fmt(width)}" height="{_fmt(height)}" fill="{BACKGROUND}"/>'
        ]

    @staticmethod
    def _stroke_attrs(color, width, dash):
        attrs = f' stroke="{color}" stroke-width="{_fmt(width)}"'
        if dash:
            attrs += ' stroke-dasharray="' + ','.join(_fmt(d) for d in dash) + '"'
        return attrs

    @staticmethod
    def _opacity(alpha):
        return '' if alpha >= 1 else f' opacity="{_fmt(alpha)}"'

    def line(self, x1, y1, x2, y2, color, width=1.0, alpha=1.0, dash=None):
        self.elements.append(
            f'<line x1="{_fmt(x1)}" y1="{_fmt(y1)}" x2="{_fmt(x2)}" y2="{_fmt(y2)}"'
            + self._stroke_attrs(color, width, dash) + self._opacity(alpha) + '/>'
        )

    def circle(self, x, y, r, fill=None, stroke=None, width=1.0, alpha=1.0, dash=None):
        attrs = f' fill="{fill or "none"}"'
        if stroke:
            attrs += self._stroke_attrs(stroke, width, dash)
        self.elements.append(
            f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="{_fmt(max(r, 0))}"'
            + attrs + self._opacity(alpha) + '/>'
        )

    def glow(self, x, y, r, stops, alpha=1.0):
        grad_id = f'g{len(self.defs)}'
        stop_tags = ''.join(
            f'<stop offset="{_fmt(offset)}" stop-color="{color}"/>' for offset, color in stops
        )
        self.defs.append(f'<radialGradient id="{grad_id}">{stop_tags}</radialGradient>')
        self.elements.append(
            f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="{_fmt(max(r, 0))}" fill="url(#{grad_id})"'
            + self._opacity(alpha) + '/>'
        )

    def text(self, x, y, text, size, color, weight=400, alpha=1.0, anchor='middle'):
        self.elements.append(
            f'<text x="{_fmt(x)}" y="{_fmt(y)}" font-size="{_fmt(size)}" font-weight="{weight}"'
            f' font-family="{html.escape(self.font_family)}" fill="{color}" text-anchor="{anchor}"'
            + self._opacity(alpha) + f'>{html.escape(text)}</text>'
        )

    def to_svg(self) -> str:
        defs = f'<defs>{"".join(self.defs)}</defs>' if self.defs else ''
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{_fmt(self.width)}" '
            f'height="{_fmt(self.height)}" viewBox="0 0 {_fmt(self.width)} {_fmt(self.height)}">'
            + defs + ''.join(self.elements) + '</svg>'
        )


def render_svg(state: ViewState) -> str:
    """Static snapshot: one frame plus the legend and status line."""
    canvas = SvgCanvas()
    status = draw_frame(state, canvas)
    y = 28
    for entry in state.legend_entries():
        canvas.circle(24, y - 4, 4, fill=entry.color, alpha=0.25 if entry.dimmed else 1.0)
        canvas.text(34, y, f'{entry.label} ({entry.count})', 11, '#777', anchor='start',
                    alpha=0.25 if entry.dimmed else 1.0)
        y += 18
    canvas.text(20, state.height - 20, status, 10, '#444', anchor='start')
    return canvas.to_svg()
