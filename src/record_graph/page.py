"""
Visualizer page

Fills the packaged HTML template. The deployed page fetches ./graph-data at
load time; an offline build embeds the payload instead.
"""

import html
import json
from importlib.resources import files
from typing import Any, Dict, Optional

TEMPLATE = 'visualizer.html'
DEFAULT_TITLE = 'Xano Record Graph'


def load_template() -> str:
    return (files('record_graph') / 'templates' / TEMPLATE).read_text(encoding='utf-8')


def embed_json(data: Any) -> str:
    """JSON safe to drop inside a <script> element."""
    return json.dumps(data, ensure_ascii=False).replace('</', '<\\/')


def render_visualizer_html(data: Optional[Dict[str, Any]] = None, title: str = DEFAULT_TITLE) -> str:
    page = load_template()
    page = page.replace('__TITLE__', html.escape(title))
    page = page.replace('__GRAPH_DATA__', embed_json(data) if data is not None else 'null')
    return page
