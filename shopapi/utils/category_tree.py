# shopapi/utils/category_tree.py
import logging
from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Set

logger = logging.getLogger(__name__)


def build_children_index(parent_by_id: Mapping[int, Optional[int]]) -> Dict[int, List[int]]:
    """Reverse the parent pointers into parent -> children lists"""
    children: Dict[int, List[int]] = defaultdict(list)
    for category_id, parent_id in parent_by_id.items():
        if parent_id is not None:
            children[parent_id].append(category_id)
    return children


def expand_category_tree(root_id: int, parent_by_id: Mapping[int, Optional[int]]) -> Set[int]:
    """Collect root_id and the ids of all its descendants.

    ``parent_by_id`` is a snapshot of every category (id -> parent id).
    An unknown root yields an empty set. A category reached twice means the
    parent pointers form a cycle: it is logged and not descended into again.
    """
    if root_id not in parent_by_id:
        return set()

    children = build_children_index(parent_by_id)
    visited: Set[int] = set()
    stack = [root_id]

    while stack:
        category_id = stack.pop()
        if category_id in visited:
            logger.error(
                f"category cycle detected: category id={category_id} is its own descendant "
                f"(tree of root id={root_id})"
            )
            continue
        visited.add(category_id)
        stack.extend(children.get(category_id, ()))

    return visited
