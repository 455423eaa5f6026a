from typing import Dict, Iterator, List, Optional, Iterable
from .models import Node, ROOT

class NodeStore:
    """Ordered node list mirroring the remote tree"""
    def __init__(self, nodes: Optional[Iterable[Node]] = None):
        self.nodes: List[Node] = list(nodes or [])

    def replace(self, nodes: Iterable[Node]):
        """Swap the whole node list, e.g. after a full resync"""
        self.nodes[:] = list(nodes)

    def append(self, node: Node):
        self.nodes.append(node)

    def extend(self, nodes: Iterable[Node]):
        self.nodes.extend(nodes)

    def get(self, node_id: str) -> Optional[Node]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def find_root(self) -> Optional[Node]:
        return find_root(self.nodes)

    def children(self, parent_id: str) -> List[Node]:
        return [n for n in self.nodes if n.parent == parent_id]

    def to_dict(self) -> Dict[str, list]:
        """Convert store to dictionary format for API/testing"""
        return {"nodes": [n.to_dict() for n in self.nodes]}

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self.nodes)

def find_root(nodes: Iterable[Node]) -> Optional[Node]:
    return next((n for n in nodes if n.parent == ROOT), None)
