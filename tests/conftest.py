import pytest
from cloudtree.models import Node, ViewContext, ROOT, FILE, DIR
from cloudtree.node_store import NodeStore
from cloudtree.channel import CommandChannel


class RecordingChannel(CommandChannel):
    """Channel double: records every command and replays canned results"""
    def __init__(self):
        self.calls = []
        self.results = {}
        self.errors = {}

    async def issue(self, route, body):
        self.calls.append((route, body))
        if route in self.errors:
            raise self.errors[route]
        result = self.results.get(route, {})
        return result() if callable(result) else result

    @property
    def routes(self):
        return [route for route, _ in self.calls]


def build_nodes():
    """
    root
    ├── docs/
    │   ├── a.txt (10)
    │   └── sub/
    │       └── b.txt (5)
    ├── photo.jpg (100, marked)
    └── notes (1)
    """
    return [
        Node("r", ROOT, DIR, "root"),
        Node("d1", "r", DIR, "docs"),
        Node("f1", "d1", FILE, "a.txt", size=10),
        Node("d2", "d1", DIR, "sub"),
        Node("f2", "d2", FILE, "b.txt", size=5),
        Node("f3", "r", FILE, "photo.jpg", size=100, marked=True),
        Node("f4", "r", FILE, "notes", size=1),
    ]


@pytest.fixture
def nodes():
    return build_nodes()

@pytest.fixture
def store(nodes):
    return NodeStore(nodes)

@pytest.fixture
def context(store):
    return ViewContext(location=store.get("r"), active_tab="home")

@pytest.fixture
def channel():
    return RecordingChannel()
