import time
import logging
from typing import Any, Callable, Dict, List
from .models import Node, ROOT, DIR
from .node_store import NodeStore
from .utils import get_copy_name, generate_id
from .error_handling import NodeNotFoundError, UnknownRouteError, UsageError

logger = logging.getLogger(__name__)

NEW_FOLDER_NAME = "New Folder"

def _now() -> int:
    return int(time.time() * 1000)

class RemoteTree:
    """
    In-memory remote authority serving the node commands.

    Keeps one tree per apikey, each seeded with a root folder on first use.
    """
    def __init__(self):
        self.trees: Dict[str, NodeStore] = {}
        self.routes: Dict[str, Callable[[NodeStore, Dict[str, Any]], Dict[str, Any]]] = {
            "update": self.update,
            "createFolder": self.create_folder,
            "move": self.move,
            "copy": self.copy,
            "delete": self.delete,
            "addMark": self.add_mark,
            "removeMark": self.remove_mark,
            "rename": self.rename,
            "changeColor": self.change_color,
        }

    def tree_for(self, apikey: str) -> NodeStore:
        if apikey not in self.trees:
            root = Node(generate_id(), ROOT, DIR, "root", last_modified=_now())
            self.trees[apikey] = NodeStore([root])
            logger.info("Created tree %s for new apikey", root.id)
        return self.trees[apikey]

    def handle(self, route: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Run one command and return its result payload"""
        handler = self.routes.get(route)
        if handler is None:
            raise UnknownRouteError(f"Unknown command: {route}", {"route": route})
        if "apikey" not in body:
            raise UsageError(f"Command {route} is missing an apikey", {"route": route})
        return handler(self.tree_for(body["apikey"]), body)

    def _lookup(self, tree: NodeStore, node_id: str) -> Node:
        node = tree.get(node_id)
        if node is None:
            raise NodeNotFoundError(f"Node not found: {node_id}", {"id": node_id})
        return node

    def _lookup_all(self, tree: NodeStore, node_ids: List[str]) -> List[Node]:
        return [self._lookup(tree, node_id) for node_id in node_ids]

    def _descendants(self, tree: NodeStore, node_id: str) -> List[Node]:
        found = []
        stack = [node_id]
        seen = {node_id}
        while stack:
            for child in tree.children(stack.pop()):
                if child.id not in seen:
                    seen.add(child.id)
                    found.append(child)
                    stack.append(child.id)
        return found

    def update(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        return tree.to_dict()

    def create_folder(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        parent = self._lookup(tree, body["parent"])
        node = Node(generate_id(), parent.id, DIR, NEW_FOLDER_NAME, last_modified=_now())
        tree.append(node)
        return {"node": node.to_dict()}

    def move(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        destination = self._lookup(tree, body["destination"])
        for node in self._lookup_all(tree, body["nodes"]):
            if node.id == destination.id or destination in self._descendants(tree, node.id):
                raise UsageError(f"Cannot move {node.id} into itself", {"id": node.id})
            node.parent = destination.id
        return {}

    def copy(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        destination = self._lookup(tree, body["destination"])
        siblings = tree.children(destination.id)

        created = []
        for node in self._lookup_all(tree, body["nodes"]):
            clone = node.clone(id=generate_id(), parent=destination.id,
                               name=get_copy_name(node.name, siblings))
            created.append(clone)

            # Map original folder ids to their clones while walking down
            new_ids = {node.id: clone.id}
            for descendant in self._descendants(tree, node.id):
                child = descendant.clone(id=generate_id(), parent=new_ids[descendant.parent])
                new_ids[descendant.id] = child.id
                created.append(child)

        tree.extend(created)
        return {"nodes": [n.to_dict() for n in created]}

    def delete(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        doomed = set()
        for node in self._lookup_all(tree, body["nodes"]):
            if node.parent == ROOT:
                raise UsageError("The root folder cannot be deleted", {"id": node.id})
            doomed.add(node.id)
            doomed.update(n.id for n in self._descendants(tree, node.id))

        tree.replace(n for n in tree if n.id not in doomed)
        return {"deleted": sorted(doomed)}

    def add_mark(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        for node in self._lookup_all(tree, body["nodes"]):
            node.marked = True
        return {}

    def remove_mark(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        for node in self._lookup_all(tree, body["nodes"]):
            node.marked = False
        return {}

    def rename(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        node = self._lookup(tree, body["target"])
        node.name = body["newName"]
        node.last_modified = _now()
        return {}

    def change_color(self, tree: NodeStore, body: Dict[str, Any]) -> Dict[str, Any]:
        for node in self._lookup_all(tree, body["nodes"]):
            node.color = body["newColor"]
        return {}
