"""
Flat relative node tree.

The transient form between the nested .blockymodel JSON and the bone model.
Every node records its parent by id and its position relative to that
parent's position. Built for one conversion and discarded afterwards.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from blockyrig.schema.blockymodel import (
    SHAPE_BOX, SHAPE_NONE,
    FaceLayout, Node, Quaternion, Shape, ShapeSettings, Vector3,
)

KIND_BONE = 'bone'
KIND_BOX = 'box'
KIND_ATTACHMENT = 'attachment'

DEFAULT_BOX_SIZE = (1.0, 1.0, 1.0)


@dataclass
class RelativeNode:
    id: str
    name: str
    kind: str
    parent_id: Optional[str] = None
    position: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    orientation: List[float] = field(default_factory=lambda: [1.0, 0.0, 0.0, 0.0])  # [w, x, y, z]
    size: Optional[List[float]] = None  # Box nodes only
    offset: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    texture_layout: Dict[str, Dict] = field(default_factory=dict)


def node_kind(shape: Shape) -> str:
    """Classify a wire shape as box, attachment or bone/container."""
    if shape.type == SHAPE_BOX:
        return KIND_BOX
    if shape.settings.is_piece:
        return KIND_ATTACHMENT
    return KIND_BONE


def flatten_nodes(nodes: List[Node]) -> List[RelativeNode]:
    """Flatten nested wire nodes into RelativeNodes (preorder)."""
    flat = []
    stack = [(node, None) for node in reversed(nodes)]
    while stack:
        node, parent_id = stack.pop()
        kind = node_kind(node.shape)
        size = None
        if kind == KIND_BOX:
            size = node.shape.settings.size.as_list() if node.shape.settings.size else list(DEFAULT_BOX_SIZE)
        flat.append(RelativeNode(
            id=node.id,
            name=node.name,
            kind=kind,
            parent_id=parent_id,
            position=node.position.as_list(),
            orientation=node.orientation.as_wxyz(),
            size=size,
            offset=node.shape.offset.as_list(),
            texture_layout={face: layout.model_dump() for face, layout in node.shape.texture_layout.items()},
        ))
        stack.extend((child, node.id) for child in reversed(node.children))
    return flat


def _shape_for(rel: RelativeNode) -> Shape:
    if rel.kind == KIND_BOX:
        return Shape(
            type=SHAPE_BOX,
            offset=Vector3.of(rel.offset),
            settings=ShapeSettings(size=Vector3.of(rel.size)),
            texture_layout={face: FaceLayout.model_validate(layout) for face, layout in rel.texture_layout.items()},
        )
    return Shape(
        type=SHAPE_NONE,
        settings=ShapeSettings(is_piece=rel.kind == KIND_ATTACHMENT),
    )


def nest_nodes(flat: List[RelativeNode]) -> List[Node]:
    """
    Build nested wire nodes from RelativeNodes.

    Expects parent-before-child order (see hierarchy.order_nodes).
    """
    built: Dict[str, Node] = {}
    roots = []
    for rel in flat:
        node = Node(
            id=rel.id,
            name=rel.name,
            position=Vector3.of(rel.position),
            orientation=Quaternion.from_wxyz(rel.orientation),
            shape=_shape_for(rel),
        )
        built[rel.id] = node
        if rel.parent_id is None:
            roots.append(node)
        else:
            built[rel.parent_id].children.append(node)
    return roots
