import re
import uuid
from typing import Iterable, Optional, Tuple
from .models import Node

COPY_SUFFIX = re.compile(r" \((?:(\d+)(?:st|nd|rd|th) )?Copy\)$")

def get_extension(name: str) -> str:
    """Text after the last dot of a file name, or '?' if there is none"""
    cut = name.rfind('.')
    return name[cut + 1:] if cut != -1 else '?'

def parse_name(name: str) -> Tuple[str, str]:
    """
    Split a name at its first dot.

    Returns:
        Tuple[str, str]: base name and extension, the extension keeping its
        leading dot ('a.tar.gz' -> ('a', '.tar.gz'), 'notes' -> ('notes', ''))
    """
    cut = name.find('.')
    if cut == -1:
        return name, ''
    return name[:cut], name[cut:]

def spelled_number(num: int) -> str:
    # No teen special-casing: 11 -> '11th', 21 -> '21th'
    if num == 1:
        return f"{num}st"
    elif num == 2:
        return f"{num}nd"
    elif num == 3:
        return f"{num}rd"
    return f"{num}th"

def get_copy_version(base_name: str, candidate: str) -> Optional[int]:
    """
    Copy version carried by a sibling name, relative to an original base name.

    Args:
        base_name: Base name of the node being copied (no extension)
        candidate: Full name of an existing sibling

    Returns:
        int: 1 for '<base> (Copy)', N for '<base> (<N><ordinal> Copy)',
             None if the sibling is not a copy of base_name

    Examples:
        - ('doc', 'doc (Copy).txt') -> 1
        - ('doc', 'doc (4th Copy).txt') -> 4
        - ('doc', 'docs (Copy).txt') -> None
    """
    if not candidate.startswith(base_name):
        return None

    candidate_base, _ = parse_name(candidate)
    match = COPY_SUFFIX.search(candidate_base)
    if not match or candidate_base[:match.start()] != base_name:
        return None
    return int(match.group(1)) if match.group(1) else 1

def get_copy_name(name: str, siblings: Iterable[Node]) -> str:
    """
    Name for a copy of `name` that does not collide with earlier copies
    among `siblings`.

    Examples:
        - no earlier copy -> 'doc (Copy).txt'
        - 'doc (Copy).txt' present -> 'doc (2nd Copy).txt'
        - 'doc (10th Copy).txt' present -> 'doc (11th Copy).txt'
    """
    base_name, extension = parse_name(name)

    highest = 0
    for sibling in siblings:
        version = get_copy_version(base_name, sibling.name)
        if version and version > highest:
            highest = version

    version = highest + 1
    if version == 1:
        return f"{base_name} (Copy){extension}"
    return f"{base_name} ({spelled_number(version)} Copy){extension}"

def generate_id() -> str:
    """Random 128-bit node id, hex encoded"""
    return uuid.uuid4().hex
