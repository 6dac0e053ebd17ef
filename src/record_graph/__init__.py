"""
Record Graph - Interactive record graph visualizer for Xano workspaces
"""

__version__ = "1.0.0"

from .graph import build_graph
from .layout import run_layout
from .viewport import ViewState

__all__ = ["build_graph", "run_layout", "ViewState"]
