import time
import logging
from typing import Any, Callable, Dict, List, Optional, Set

import httpx

from .models import Node, ViewContext, DIR
from .node_store import NodeStore, find_root
from .channel import CommandChannel, HttpCommandChannel
from .config import Settings
from .projection import current_displayed_nodes
from .utils import get_copy_name, generate_id
from .error_handling import UsageError, TreeIntegrityError, log_operation

logger = logging.getLogger(__name__)

HOME_TAB = "home"
TERMINAL_TAB = "terminal"

class NodeManager:
    """
    Runs node operations against the remote authority and mirrors each
    successful one onto the local store, so the view need not wait for a
    full update.
    """
    def __init__(
        self,
        store: NodeStore,
        channel: CommandChannel,
        context: ViewContext,
        apikey: str,
        location_sink: Optional[Callable[[Node], None]] = None
    ):
        self.store = store
        self.channel = channel
        self.context = context
        self.apikey = apikey
        self.location_sink = location_sink or self._set_location

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: Optional[NodeStore] = None,
        context: Optional[ViewContext] = None,
        client: Optional[httpx.AsyncClient] = None
    ) -> "NodeManager":
        """Manager talking HTTP to settings.base_url with settings.apikey"""
        channel = HttpCommandChannel.from_settings(settings, client=client)
        return cls(store or NodeStore(), channel, context or ViewContext(), settings.apikey)

    def _set_location(self, node: Node):
        self.context.location = node

    async def _issue(self, route: str, **fields) -> Dict[str, Any]:
        log_operation(logger, route, **fields)
        return await self.channel.issue(route, {"apikey": self.apikey, **fields})

    def displayed_nodes(self, include_folder_size: bool = False) -> Dict[str, List[Node]]:
        return current_displayed_nodes(self.store.nodes, self.context, include_folder_size)

    async def update(self, keep_location: bool = False):
        """Replace the store with the remote node list and reset the location"""
        result = await self._issue("update")
        nodes = [Node.from_dict(data) for data in result["nodes"]]

        root = find_root(nodes)
        if not root:
            raise TreeIntegrityError("Cannot examine root node.", {"nodes": len(nodes)})

        if keep_location:
            location = self.context.location
            location_id = location.id if location else None
            loc_node = next((n for n in nodes if n.id == location_id), None) if location_id else None
            self.location_sink(loc_node or root)
        else:
            self.location_sink(root)

        self.store.replace(nodes)
        logger.debug("Store updated with %d nodes", len(nodes))

    async def create_folder(self, destination: Node) -> Node:
        result = await self._issue("createFolder", parent=destination.id)
        node = Node.from_dict(result["node"])
        self.store.append(node)
        return node

    async def move(self, nodes: List[Node], destination: Node):
        # Only meaningful while browsing the tree itself
        if self.context.search.active or self.context.active_tab not in (HOME_TAB, TERMINAL_TAB):
            logger.debug("Ignoring move outside of home/terminal view")
            return None

        await self._issue("move", nodes=[n.id for n in nodes], destination=destination.id)
        for n in nodes:
            n.parent = destination.id

    async def copy(self, nodes: List[Node], destination: Node) -> Optional[List[Node]]:
        """
        Copy nodes, and the subtrees of copied folders, into destination.

        Every clone gets a fresh id, and top-level clones a name that does not
        collide with earlier copies in destination. The given nodes and their
        subtrees are left untouched.

        Args:
            nodes: Nodes to copy
            destination: Target folder

        Returns:
            List[Node]: All clones appended to the store, or None if the
            current view does not allow copying
        """
        if self.context.active_tab != HOME_TAB:
            logger.debug("Ignoring copy outside of home view")
            return None

        if not isinstance(nodes, list):
            raise UsageError("Cannot perform 'copy' in nodes. nodes isn't a list.")

        if not isinstance(destination, Node):
            raise UsageError("Cannot perform 'copy' in nodes. destination isn't a Node.")

        await self._issue("copy", nodes=[n.id for n in nodes], destination=destination.id)

        siblings = self.store.children(destination.id)
        search_active = self.context.search.active

        cloned = []
        for node in nodes:
            clone = node.clone(
                id=generate_id(),
                # Search results keep their place
                parent=node.parent if search_active else destination.id,
                name=get_copy_name(node.name, siblings)
            )
            cloned.append(clone)

            if clone.type == DIR:
                cloned.extend(self._clone_children(node.id, clone.id))

        self.store.extend(cloned)
        return cloned

    def _clone_children(self, source_id: str, clone_id: str, _visited: Optional[Set[str]] = None) -> List[Node]:
        """Clone every descendant of source_id under the folder clone_id"""
        visited = _visited if _visited is not None else set()
        if source_id in visited:
            logger.warning("Parent cycle detected at folder %s, skipping", source_id)
            return []
        visited.add(source_id)

        clones = []
        for n in self.store.children(source_id):
            child = n.clone(id=generate_id(), parent=clone_id)
            clones.append(child)
            if n.type == DIR:
                clones.extend(self._clone_children(n.id, child.id, visited))
        return clones

    async def delete(self, nodes: List[Node]):
        """Delete nodes remotely (recursively there), then resync"""
        await self._issue("delete", nodes=[n.id for n in nodes])
        await self.update(keep_location=True)

    async def add_mark(self, nodes: List[Node]):
        await self._issue("addMark", nodes=[n.id for n in nodes])
        for n in nodes:
            n.marked = True

    async def remove_mark(self, nodes: List[Node]):
        await self._issue("removeMark", nodes=[n.id for n in nodes])
        # TODO: confirm with product whether the local flag should clear here;
        # the remote clears it and the next update picks that up.
        for n in nodes:
            n.marked = True

    async def rename(self, node: Node, new_name: str):
        await self._issue("rename", target=node.id, newName=new_name)
        node.last_modified = int(time.time() * 1000)
        node.name = new_name

    async def change_color(self, nodes: List[Node], color: str):
        await self._issue("changeColor", nodes=[n.id for n in nodes], newColor=color)
        for n in nodes:
            n.color = color
