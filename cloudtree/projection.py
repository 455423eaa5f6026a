import logging
from typing import Dict, List, Optional, Sequence, Set
from .models import Node, ViewContext, FILE, DIR
from .utils import get_extension

logger = logging.getLogger(__name__)

MARKED_TAB = "marked"

def get_source_nodes(nodes: Sequence[Node], context: ViewContext) -> Sequence[Node]:
    """Nodes a view is built from: search results, starred nodes or the whole store"""
    if context.search.active:
        return context.search.nodes
    elif context.active_tab == MARKED_TAB:
        return [n for n in nodes if n.marked]
    return nodes

def calc_folder_size(folder_id: str, nodes: Sequence[Node], _visited: Optional[Set[str]] = None) -> int:
    """
    Recursive size of a folder, summed over the given node list only.

    Args:
        folder_id: ID of the folder to measure
        nodes: Node list to search for descendants
        _visited: Folder ids already summed during this call

    Returns:
        int: Sum of all descendant file sizes
    """
    visited = _visited if _visited is not None else set()
    if folder_id in visited:
        logger.warning("Parent cycle detected at folder %s, skipping", folder_id)
        return 0
    visited.add(folder_id)

    size = 0
    for n in nodes:
        if n.parent == folder_id:
            if n.type == DIR:
                size += calc_folder_size(n.id, nodes, visited)
            elif n.type == FILE:
                size += n.size
    return size

def current_displayed_nodes(
    nodes: Sequence[Node],
    context: ViewContext,
    include_folder_size: bool = False
) -> Dict[str, List[Node]]:
    """
    Files and folders visible for the current view.

    While searching or on the marked tab the whole source list is shown flat,
    otherwise only the children of the current location. Transient flags
    (cutted, selected, editable, extension) are refreshed on every call and
    folder sizes are recomputed over the source list when requested.

    Returns:
        Dict with 'file' and 'dir' lists, each in source order
    """
    source = get_source_nodes(nodes, context)
    auto_add = context.active_tab == MARKED_TAB or context.search.active
    location_id = context.location_id
    clipboard = context.clipboard

    ret: Dict[str, List[Node]] = {FILE: [], DIR: []}
    for n in source:
        if not auto_add and n.parent != location_id:
            continue

        n.cutted = clipboard.type == "move" and n.id in clipboard.nodes
        n.selected = n.id in context.selection
        n.editable = n.id == context.editable
        ret[n.type].append(n)

        if include_folder_size and n.type == DIR:
            n.size = calc_folder_size(n.id, source)

        if n.type == FILE:
            n.extension = get_extension(n.name)

    return ret
