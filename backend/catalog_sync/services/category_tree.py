"""
Category tree building from storefront category paths
"""
import logging
from typing import Dict, Iterable, Iterator, List, Set

from catalog_sync.models.category import CategoryNode, CategoryPath

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "


def split_category_path(full_name: str) -> CategoryPath:
    """Split "Apparel > Shoes > Running" into its level names."""
    if not full_name:
        return ()
    return tuple(level.strip() for level in full_name.split(PATH_SEPARATOR) if level.strip())


def build_category_tree(paths: Iterable[str]) -> Dict[str, CategoryNode]:
    """
    Build a name-keyed category forest from full category paths.

    Levels are walked left to right. A node is created the first time its name
    is seen, with the preceding level as parent, and registered as a child of
    that parent. A name seen again under a different parent keeps its first
    parent; the conflict is logged.

    Args:
        paths: Full category names ("A > B > C"). Duplicates collapse,
            first-seen order is kept.

    Returns:
        Dict of level name -> CategoryNode. Insertion order puts every parent
        before its children.
    """
    tree: Dict[str, CategoryNode] = {}

    for full_name in dict.fromkeys(paths):
        parent = None
        for level in split_category_path(full_name):
            node = tree.get(level)
            if node is None:
                tree[level] = CategoryNode(name=level, parent=parent)
                if parent is not None:
                    tree[parent].children.append(level)
            elif node.parent != parent:
                logger.warning(
                    f"Category '{level}' appears under '{parent or 'Root'}' in '{full_name}' "
                    f"but was first seen under '{node.parent or 'Root'}'; keeping the first parent"
                )
            parent = level

    return tree


def iter_top_down(tree: Dict[str, CategoryNode]) -> Iterator[CategoryNode]:
    """
    Yield nodes so that every in-tree parent comes before its children.

    Keeps insertion order where possible; a node whose parent has not been
    yielded yet is deferred until it has. Nodes whose parent is not part of
    the tree are yielded in place.
    """
    emitted: Set[str] = set()
    pending: List[CategoryNode] = list(tree.values())

    while pending:
        deferred: List[CategoryNode] = []
        for node in pending:
            if node.parent is None or node.parent not in tree or node.parent in emitted:
                emitted.add(node.name)
                yield node
            else:
                deferred.append(node)

        if len(deferred) == len(pending):
            # Parent cycle, cannot come out of build_category_tree
            logger.error(f"Category parent cycle among: {', '.join(n.name for n in deferred)}")
            yield from deferred
            return
        pending = deferred


def get_roots(tree: Dict[str, CategoryNode]) -> List[str]:
    return [name for name, node in tree.items() if node.is_root]
