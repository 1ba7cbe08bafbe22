"""
BlockyModel → Bone Model Importer

Rebuilds the absolute-pivot bone tree from the engine's parent-relative node
tree.

Nodes are materialized parent-before-child, accumulating absolute positions
down the tree (a root node's parent is the origin):

- Container node           → bone; parent = nearest ancestor bone
- Box node under a bone    → cube of the nearest ancestor bone,
                             origin = absolute position + offset - size / 2
- Box node without a bone  → standalone primitive, synthesized as a
  ancestor                   single-cube bone named after the node
- Attachment (isPiece)     → attachment of the nearest ancestor bone,
                             position relative to that bone's pivot

Quaternions are converted back to Euler degrees with EULER_ORDER.

The import is all-or-nothing: any structural problem rejects the whole tree.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from blockyrig.converters.blockymodel.nodes import (
    KIND_ATTACHMENT, KIND_BOX, RelativeNode, flatten_nodes,
)
from blockyrig.converters.hierarchy import order_nodes
from blockyrig.converters.rotation_utils import EULER_ORDER, is_identity, quaternion_to_euler
from blockyrig.exceptions import StructuralError
from blockyrig.schema.blockymodel import BlockyModel
from blockyrig.schema.bonemodel import Attachment, Bone, Cube, ModelGeometry
from blockyrig.texturing.box_uv import footprint, layout_density_candidates, uv_from_texture_layout
from blockyrig.texturing.shelf_packer import MIN_TEXTURE_SIZE

logger = logging.getLogger(__name__)

ORIGIN = [0.0, 0.0, 0.0]
OFFSET_EPSILON = 1e-9


def _add(a: List[float], b: List[float]) -> List[float]:
    return [a[i] + b[i] for i in range(3)]


def _euler_or_none(quat: List[float]) -> Optional[List[float]]:
    if is_identity(quat):
        return None
    return quaternion_to_euler(quat, order=EULER_ORDER)


def _cube_from_node(node: RelativeNode, absolute: List[float], rotated: bool = True) -> Cube:
    """Cube whose node sits at `absolute`; the box center is shifted by shape offset."""
    size = node.size
    center = _add(absolute, node.offset)
    has_offset = any(abs(c) > OFFSET_EPSILON for c in node.offset)
    return Cube(
        origin=[center[i] - size[i] / 2 for i in range(3)],
        size=list(size),
        rotation=_euler_or_none(node.orientation) if rotated else None,
        # The node position is the rotation center; only differs from the center when offset
        pivot=list(absolute) if rotated and has_offset else None,
        uv=uv_from_texture_layout(node.texture_layout) if node.texture_layout else None,
    )


def _synthesize_box_bone(node: RelativeNode, absolute: List[float]) -> Bone:
    """Box node with no bone ancestor: becomes a bone owning a single cube."""
    return Bone(
        name=node.name,
        parent=None,
        pivot=list(absolute),
        rotation=_euler_or_none(node.orientation),
        cubes=[_cube_from_node(node, absolute, rotated=False)],
    )


def nodes_to_bones(nodes: List[RelativeNode]) -> List[Bone]:
    """
    Convert a flat relative node list into bones with absolute pivots.

    Raises:
        StructuralError: duplicate node id, missing parent id, parent cycle
            or duplicate bone name
    """
    ordered = order_nodes(nodes)

    absolute: Dict[str, List[float]] = {}
    owner: Dict[str, str] = {}          # node id -> name of the bone that owns it
    bone_node_ids: Dict[str, str] = {}  # bone name -> node id it was built from
    bones: Dict[str, Bone] = {}

    def add_bone(bone: Bone, node: RelativeNode) -> None:
        if bone.name in bones:
            raise StructuralError(f"Duplicate bone '{bone.name}' (node '{node.id}')", node=node.id)
        bones[bone.name] = bone
        bone_node_ids[bone.name] = node.id
        owner[node.id] = bone.name

    for node in ordered:
        parent_absolute = absolute[node.parent_id] if node.parent_id is not None else ORIGIN
        position = _add(parent_absolute, node.position)
        absolute[node.id] = position
        owner_name = owner.get(node.parent_id) if node.parent_id is not None else None

        if node.kind == KIND_BOX and owner_name is not None:
            bones[owner_name].cubes.append(_cube_from_node(node, position))
            owner[node.id] = owner_name

        elif node.kind == KIND_BOX:
            add_bone(_synthesize_box_bone(node, position), node)
            logger.debug(f"Synthesized bone '{node.name}' for standalone box node {node.id}")

        elif node.kind == KIND_ATTACHMENT and owner_name is not None:
            owner_bone = bones[owner_name]
            if node.parent_id == bone_node_ids[owner_name]:
                relative = list(node.position)
            else:
                relative = [position[i] - owner_bone.pivot[i] for i in range(3)]
            owner_bone.attachments.append(Attachment(name=node.name, position=relative))
            owner[node.id] = owner_name

        else:
            add_bone(Bone(
                name=node.name,
                parent=owner_name,
                pivot=position,
                rotation=_euler_or_none(node.orientation),
            ), node)

    return list(bones.values())


def _infer_density_scale(nodes: List[RelativeNode]) -> int:
    """
    Recover the density the texture layouts were written at.

    Every laid-out box must agree on one scale; the smallest agreeing scale
    wins when several reproduce the same pixel sizes. No layouts means 1.

    Raises:
        StructuralError: a layout fits no scale, or boxes disagree
    """
    candidates = None
    for node in nodes:
        if node.kind != KIND_BOX or not node.texture_layout:
            continue
        fits = layout_density_candidates(node.texture_layout, node.size)
        if not fits:
            raise StructuralError(
                f"Texture layout of box node '{node.id}' ('{node.name}') is not a box UV layout "
                f"of size {node.size} at any density", node=node.id)
        candidates = fits if candidates is None else candidates & fits
        if not candidates:
            raise StructuralError(
                f"Texture layout of box node '{node.id}' ('{node.name}') conflicts with the density "
                f"of the preceding boxes", node=node.id)

    if candidates is None:
        return 1
    return min(candidates)


def _atlas_size_for(bones: List[Bone], scale: int) -> List[int]:
    """Smallest square MIN_TEXTURE_SIZE * 2^k atlas holding every cube footprint."""
    extent = 0
    for bone in bones:
        for cube in bone.cubes:
            if cube.uv is None or cube.is_degenerate():
                continue
            width, height = footprint(cube.size, scale)
            extent = max(extent, cube.uv[0] + width, cube.uv[1] + height)

    size = MIN_TEXTURE_SIZE
    while size < extent:
        size *= 2
    return [size, size]


def import_blockymodel(
    data: Union[Dict[str, Any], str],
    options: Dict[str, Any] = None,
) -> ModelGeometry:
    """
    Import a .blockymodel document into a bone model.

    Args:
        data: BlockyModel dict or JSON string
        options: Import options (identifier, texture_size, density_scale).
            density_scale defaults to the scale the texture layouts were
            written at, texture_size to the smallest square atlas that
            holds every recovered footprint.

    Returns:
        ModelGeometry

    Raises:
        StructuralError: malformed document or node tree
    """
    if options is None:
        options = {}

    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise StructuralError(f"Failed to parse .blockymodel JSON: {e}")

    try:
        blocky = BlockyModel.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = '.'.join(str(part) for part in first['loc'])
        raise StructuralError(f"Invalid .blockymodel at {location}: {first['msg']}", node=location) from e

    flat = flatten_nodes(blocky.nodes)
    bones = nodes_to_bones(flat)

    identifier = options.get('identifier') or data.get('modelName') or 'model'
    scale = options.get('density_scale') or _infer_density_scale(flat)
    texture_size = options.get('texture_size') or _atlas_size_for(bones, scale)

    logger.info(f"Imported BlockyModel '{identifier}' ({len(bones)} bones, density x{scale}, "
                f"atlas {texture_size[0]}x{texture_size[1]})")
    return ModelGeometry(
        identifier=identifier,
        texture_size=list(texture_size),
        density_scale=scale,
        bones=bones,
    )
