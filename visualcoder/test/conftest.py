import pytest

from visualcoder.compiler import build


class GraphFactory:
    """Builds editor-shaped node/edge dicts; every graph starts with a 'start' entry node."""

    def __init__(self):
        self.nodes = [{"id": "start", "type": "input", "data": {"label": "Start"}}]
        self.edges = []

    def node(self, node_id, type, **data):
        self.nodes.append({"id": node_id, "type": type, "data": data})
        return node_id

    def edge(self, source, target, handle=None):
        self.edges.append({
            "id": f"e{len(self.edges) + 1}",
            "source": source,
            "target": target,
            "sourceHandle": handle,
        })

    def chain(self, *node_ids):
        for source, target in zip(node_ids, node_ids[1:]):
            self.edge(source, target)

    def build(self):
        return build(self.nodes, self.edges)


@pytest.fixture
def graph():
    return GraphFactory()
