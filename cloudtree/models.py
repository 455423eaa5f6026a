from typing import Any, Dict, Iterable, List, Optional, Set

ROOT = "root"
FILE = "file"
DIR = "dir"

class Node:
    __slots__ = ['id', 'parent', 'type', 'name', 'size', 'marked', 'color', 'last_modified',
                 'selected', 'cutted', 'editable', 'extension']

    def __init__(self, id: str, parent: str, type: str, name: str, size: int = 0,
                 marked: bool = False, color: str = "", last_modified: int = 0):
        if type not in (FILE, DIR):
            raise ValueError(f"Unknown node type: {type}")
        self.id = id
        self.parent = parent
        self.type = type
        self.name = name
        self.size = size
        self.marked = marked
        self.color = color
        self.last_modified = last_modified

        # Populated by the projection, never serialised
        self.selected = False
        self.cutted = False
        self.editable = False
        self.extension = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            id=data["id"],
            parent=data["parent"],
            type=data["type"],
            name=data["name"],
            size=data.get("size", 0),
            marked=data.get("marked", False),
            color=data.get("color", ""),
            last_modified=data.get("lastModified", 0)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "parent": self.parent,
            "type": self.type,
            "name": self.name,
            "size": self.size,
            "marked": self.marked,
            "color": self.color,
            "lastModified": self.last_modified
        }

    def clone(self, **changes) -> "Node":
        """Shallow copy with the given persisted fields replaced"""
        data = self.to_dict()
        data.update(changes)
        return Node(
            id=data["id"],
            parent=data["parent"],
            type=data["type"],
            name=data["name"],
            size=data["size"],
            marked=data["marked"],
            color=data["color"],
            last_modified=data["lastModified"]
        )

    @property
    def is_directory(self) -> bool:
        return self.type == DIR

    def __repr__(self):
        return f"Node(id={self.id!r}, parent={self.parent!r}, type={self.type!r}, name={self.name!r})"

class Clipboard:
    """Nodes put aside by cut ("move") or copy ("copy")"""
    __slots__ = ['type', 'nodes']

    def __init__(self, type: Optional[str] = None, nodes: Iterable[str] = ()):
        self.type = type
        self.nodes: Set[str] = set(nodes)

class Search:
    __slots__ = ['active', 'nodes']

    def __init__(self, active: bool = False, nodes: Optional[List[Node]] = None):
        self.active = active
        self.nodes: List[Node] = nodes or []

class ViewContext:
    """
    Snapshot of the user-interface state the node views depend on.

    selection, clipboard.nodes and editable hold node ids, so membership
    survives a full store replacement.
    """
    def __init__(
        self,
        location: Optional[Node] = None,
        active_tab: str = "home",
        search: Optional[Search] = None,
        selection: Iterable[str] = (),
        clipboard: Optional[Clipboard] = None,
        editable: Optional[str] = None
    ):
        self.location = location
        self.active_tab = active_tab
        self.search = search or Search()
        self.selection: Set[str] = set(selection)
        self.clipboard = clipboard or Clipboard()
        self.editable = editable

    @property
    def location_id(self) -> str:
        return self.location.id if self.location else ROOT
