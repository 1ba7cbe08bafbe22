"""
Bone Model → BlockyModel Exporter

Converts the absolute-pivot bone tree into the engine's parent-relative node
tree.

Position handling:
- Bone node:       pivot - parent pivot (root bones: pivot itself)
- Cube node:       cube pivot - owning bone pivot. The cube pivot defaults to
                   the cube center, so usually this is center - bone pivot.
                   shape.offset carries center - cube pivot.
- Attachment node: already relative to the bone, written unchanged

Rotations are converted from Euler degrees to quaternions with EULER_ORDER.
"""

import itertools
import json
import logging
from typing import Any, Dict, List, Optional, Union

from blockyrig.converters.blockymodel.nodes import (
    KIND_ATTACHMENT, KIND_BONE, KIND_BOX, RelativeNode, nest_nodes,
)
from blockyrig.converters.hierarchy import build_bone_index, child_bones, order_bones
from blockyrig.converters.rotation_utils import EULER_ORDER, euler_to_quaternion
from blockyrig.schema.blockymodel import BlockyModel
from blockyrig.schema.bonemodel import Bone, Cube, ModelGeometry, parse_model
from blockyrig.texturing.box_uv import texture_layout

logger = logging.getLogger(__name__)

ORIGIN = [0.0, 0.0, 0.0]
ZERO_ROTATION = [0.0, 0.0, 0.0]
POSITION_EPSILON = 1e-9


def _sub(a: List[float], b: List[float]) -> List[float]:
    return [a[i] - b[i] for i in range(3)]


def _is_zero(v: Optional[List[float]]) -> bool:
    return v is None or all(abs(c) < POSITION_EPSILON for c in v)


def _cube_layout(cube: Cube, scale: int) -> Dict[str, Dict]:
    if cube.uv is None or cube.is_degenerate():
        return {}
    return texture_layout(cube.uv, cube.size, scale)


def _is_standalone_box(bone: Bone, children: Dict[str, List[Bone]]) -> bool:
    """
    A root bone that is nothing but one unrotated, unpivoted cube.

    Written as a single box node; the importer turns such a node back into a
    single-cube bone named after it.
    """
    return (
        bone.parent is None
        and len(bone.cubes) == 1
        and not bone.attachments
        and not children[bone.name]
        and _is_zero(bone.cubes[0].rotation)
        and bone.cubes[0].pivot is None
    )


def bones_to_nodes(model: Union[ModelGeometry, Dict[str, Any], str]) -> List[RelativeNode]:
    """
    Convert a bone model into a flat relative node list (parent-before-child).

    Node ids are "1", "2", ... in output order. Each bone's children are its
    cubes, then its attachments, then its child bones.

    Raises:
        StructuralError: missing fields, duplicate bone names, dangling
            parent reference or parent cycle
    """
    model = parse_model(model)
    ordered = order_bones(model.bones)
    index = build_bone_index(model.bones)
    children = child_bones(model.bones)
    scale = model.density_scale

    ids = (str(n) for n in itertools.count(1))
    bone_node_ids: Dict[str, str] = {}
    flat: List[RelativeNode] = []

    for bone in ordered:
        parent_pivot = index[bone.parent].pivot if bone.parent else ORIGIN
        position = _sub(bone.pivot, parent_pivot)
        orientation = euler_to_quaternion(bone.rotation or ZERO_ROTATION, order=EULER_ORDER)
        parent_id = bone_node_ids.get(bone.parent) if bone.parent else None

        if _is_standalone_box(bone, children):
            cube = bone.cubes[0]
            node = RelativeNode(
                id=next(ids),
                name=bone.name,
                kind=KIND_BOX,
                parent_id=None,
                position=position,
                orientation=orientation,
                size=list(cube.size),
                offset=_sub(cube.center(), bone.pivot),
                texture_layout=_cube_layout(cube, scale),
            )
            bone_node_ids[bone.name] = node.id
            flat.append(node)
            logger.debug(f"Bone '{bone.name}' written as standalone box node {node.id}")
            continue

        bone_node = RelativeNode(
            id=next(ids),
            name=bone.name,
            kind=KIND_BONE,
            parent_id=parent_id,
            position=position,
            orientation=orientation,
        )
        bone_node_ids[bone.name] = bone_node.id
        flat.append(bone_node)

        for idx, cube in enumerate(bone.cubes):
            cube_pivot = cube.effective_pivot()
            flat.append(RelativeNode(
                id=next(ids),
                name=f"{bone.name}_shape_{idx}",
                kind=KIND_BOX,
                parent_id=bone_node.id,
                position=_sub(cube_pivot, bone.pivot),
                orientation=euler_to_quaternion(cube.rotation or ZERO_ROTATION, order=EULER_ORDER),
                size=list(cube.size),
                offset=_sub(cube.center(), cube_pivot),
                texture_layout=_cube_layout(cube, scale),
            ))

        for attachment in bone.attachments:
            flat.append(RelativeNode(
                id=next(ids),
                name=attachment.name,
                kind=KIND_ATTACHMENT,
                parent_id=bone_node.id,
                position=list(attachment.position),
            ))

    return flat


def to_blockymodel(model: Union[ModelGeometry, Dict[str, Any], str]) -> BlockyModel:
    """Convert a bone model into a nested BlockyModel."""
    flat = bones_to_nodes(model)
    return BlockyModel(nodes=nest_nodes(flat))


def export_blockymodel(
    model: Union[ModelGeometry, Dict[str, Any], str],
    options: Dict[str, Any] = None,
) -> str:
    """
    Export a bone model to .blockymodel JSON string.

    Args:
        model: Bone model (ModelGeometry, dict or JSON string)
        options: Export options (indent=2)

    Returns:
        BlockyModel JSON string
    """
    if options is None:
        options = {}

    blocky = to_blockymodel(model)
    logger.info(f"Exported {len(blocky.nodes)} root nodes to BlockyModel")
    return json.dumps(blocky.model_dump(by_alias=True, exclude_none=True), indent=options.get('indent', 2))
