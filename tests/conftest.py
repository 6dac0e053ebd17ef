"""Shared fixtures: sample payloads, a fake HTTP session and a recording canvas."""

import json

import pytest

from record_graph.examples import example_graph_data
from record_graph.graph import build_graph
from record_graph.layout import run_layout
from record_graph.render import Canvas


class FakeResponse:
    def __init__(self, payload=None, status=200, text=None):
        self.status_code = status
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ''
        self.text = text
        self.content = text.encode('utf-8')

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._payload


class FakeSession:
    """Routes (method, meta path) to canned responses and records every call.

    A list value is consumed one response per call; unknown routes answer 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def request(self, method, url, headers=None, timeout=None, **kwargs):
        path = url.split('/api:meta', 1)[1]
        body = kwargs.get('data')
        if isinstance(body, bytes):
            body = body.decode('utf-8')
        self.calls.append({
            'method': method,
            'url': url,
            'path': path,
            'headers': headers or {},
            'body': body,
            'json': kwargs.get('json'),
        })
        resp = self.routes.get((method, path))
        if resp is None:
            return FakeResponse({'message': 'not found'}, status=404)
        if isinstance(resp, list):
            return resp.pop(0)
        return resp

    def calls_to(self, method, path):
        return [c for c in self.calls if c['method'] == method and c['path'] == path]


class RecordingCanvas(Canvas):
    def __init__(self):
        self.ops = []

    def clear(self, width, height):
        self.ops.append(('clear', width, height))

    def line(self, x1, y1, x2, y2, color, width=1.0, alpha=1.0, dash=None):
        self.ops.append(('line', color, width, alpha))

    def circle(self, x, y, r, fill=None, stroke=None, width=1.0, alpha=1.0, dash=None):
        self.ops.append(('circle', fill, stroke, alpha, dash))

    def glow(self, x, y, r, stops, alpha=1.0):
        self.ops.append(('glow', tuple(stops), alpha))

    def text(self, x, y, text, size, color, weight=400, alpha=1.0, anchor='middle'):
        self.ops.append(('text', text, size, alpha))

    def of(self, kind):
        return [op for op in self.ops if op[0] == kind]


@pytest.fixture
def example_data():
    return example_graph_data()


@pytest.fixture
def laid_out_example(example_data):
    return run_layout(build_graph(example_data), 1440, 900)


@pytest.fixture
def two_table_data():
    """One user, one order pointing at it."""
    return {
        'users': [{'id': 1, 'name': 'Alice'}],
        'orders': [{'id': 10, 'user_id': 1, 'status': 'open'}],
    }


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def recording_canvas():
    return RecordingCanvas()


@pytest.fixture
def canvas_factory():
    return RecordingCanvas
