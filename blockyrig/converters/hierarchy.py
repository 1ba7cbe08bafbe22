"""
Tree traversal helpers shared by the bone model and the relative node tree.

Both trees reference parents by key (bone name / node id). The references are
resolved through an index built once per traversal, never through live
pointers, and are validated before any conversion output is produced:

- keys must be unique
- every parent key must exist
- the parent graph must be a forest (no cycles)

Any violation raises StructuralError naming the offending bone/node.
"""

import logging
from typing import Callable, Dict, Hashable, List, Optional, TypeVar

from blockyrig.exceptions import StructuralError
from blockyrig.schema.bonemodel import Bone

logger = logging.getLogger(__name__)

T = TypeVar('T')


def build_index(items: List[T], key: Callable[[T], Hashable], what: str = 'node') -> Dict[Hashable, T]:
    """Map key -> item, rejecting duplicate keys."""
    index = {}
    for item in items:
        k = key(item)
        if k in index:
            raise StructuralError(f"Duplicate {what} '{k}'", node=k)
        index[k] = item
    return index


def preorder(
    items: List[T],
    key: Callable[[T], Hashable],
    parent: Callable[[T], Optional[Hashable]],
    what: str = 'node',
) -> List[T]:
    """
    Order items parent-before-child (depth-first, siblings in input order).

    Roots are items without a parent, in input order.

    Raises:
        StructuralError: duplicate key, dangling parent or cycle
    """
    index = build_index(items, key, what)

    children: Dict[Hashable, List[T]] = {k: [] for k in index}
    roots = []
    for item in items:
        p = parent(item)
        if p is None:
            roots.append(item)
        elif p not in index:
            raise StructuralError(f"{what.capitalize()} '{key(item)}' references missing parent '{p}'", node=key(item))
        else:
            children[p].append(item)

    ordered = []
    stack = list(reversed(roots))
    while stack:
        item = stack.pop()
        ordered.append(item)
        stack.extend(reversed(children[key(item)]))

    if len(ordered) != len(items):
        # Anything not reachable from a root sits on a parent cycle
        reached = {key(item) for item in ordered}
        stuck = next(key(item) for item in items if key(item) not in reached)
        raise StructuralError(f"{what.capitalize()} '{stuck}' is part of a parent cycle", node=stuck)

    return ordered


def build_bone_index(bones: List[Bone]) -> Dict[str, Bone]:
    """Name -> bone index; bone names must be unique."""
    return build_index(bones, lambda b: b.name, 'bone')


def order_bones(bones: List[Bone]) -> List[Bone]:
    """Bones in parent-before-child order, validating the parent references."""
    return preorder(bones, lambda b: b.name, lambda b: b.parent, 'bone')


def child_bones(bones: List[Bone]) -> Dict[str, List[Bone]]:
    """Parent name -> direct child bones, in input order."""
    children: Dict[str, List[Bone]] = {b.name: [] for b in bones}
    for bone in bones:
        if bone.parent is not None and bone.parent in children:
            children[bone.parent].append(bone)
    return children


def order_nodes(nodes):
    """RelativeNodes in parent-before-child order, validating parent ids."""
    return preorder(nodes, lambda n: n.id, lambda n: n.parent_id, 'node')
