"""
Model-level UV atlas packing and rescaling.

Assigns every cube a box UV origin inside a freshly packed atlas, and remaps
those origins when the atlas image comes back at a different resolution.

Both operations return a NEW model; the cube UVs and the model's recorded
texture_size always change together.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from blockyrig.exceptions import DegenerateGeometryError
from blockyrig.schema.bonemodel import ModelGeometry, parse_model
from blockyrig.texturing.box_uv import density_scale, footprint
from blockyrig.texturing.shelf_packer import PackItem, pack

logger = logging.getLogger(__name__)


@dataclass
class UVPackResult:
    """
    Result of packing a model's UVs.

    Attributes:
        model: New model with cube UVs, texture_size and density_scale set
        atlas_size: Square atlas side in pixels
        skipped: One DegenerateGeometryError per cube left out of the atlas
    """
    model: ModelGeometry
    atlas_size: int
    skipped: List[DegenerateGeometryError] = field(default_factory=list)


def pack_model_uvs(
    model: Union[ModelGeometry, Dict[str, Any], str],
    density: Union[str, int] = '16x',
) -> UVPackResult:
    """
    Pack all cubes of a model into a new square atlas.

    The layout is recomputed from scratch; any previous UVs are discarded.
    Degenerate cubes (non-positive size) are not packed: their UV is cleared
    and the error is reported in ``skipped``.

    Args:
        model: Bone model (ModelGeometry, dict or JSON string)
        density: '16x', '32x', '64x' or a positive multiplier

    Returns:
        UVPackResult
    """
    model = parse_model(model)
    scale = density_scale(density)

    items = []
    skipped = []
    for bone_idx, bone in enumerate(model.bones):
        for cube_idx, cube in enumerate(bone.cubes):
            try:
                width, height = footprint(cube.size, scale)
            except DegenerateGeometryError:
                error = DegenerateGeometryError(
                    f"Cube {cube_idx} of bone '{bone.name}' has non-positive size {cube.size}; not packed",
                    bone=bone.name,
                    cube_index=cube_idx,
                    size=list(cube.size),
                )
                logger.warning(str(error))
                skipped.append(error)
                cube.uv = None
                continue
            items.append(PackItem(id=(bone_idx, cube_idx), width=width, height=height))

    result = pack(items)

    for (bone_idx, cube_idx), (u, v) in result.positions.items():
        model.bones[bone_idx].cubes[cube_idx].uv = [u, v]

    model.texture_size = [result.atlas_size, result.atlas_size]
    model.density_scale = scale

    logger.info(f"Packed {len(items)} cubes into {result.atlas_size}x{result.atlas_size} atlas "
                f"(density x{scale}, {len(skipped)} skipped)")
    return UVPackResult(model=model, atlas_size=result.atlas_size, skipped=skipped)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rescale_uv(
    uv: List[int],
    old_size: Tuple[int, int],
    new_size: Tuple[int, int],
) -> List[int]:
    """
    Remap a UV origin from one atlas resolution to another.

    Each axis scales independently: new = round(old * new_size / old_size).
    """
    old_w, old_h = old_size
    new_w, new_h = new_size
    if (old_w, old_h) == (new_w, new_h):
        return list(uv)
    u, v = uv
    return [_round_half_up(u * new_w / old_w), _round_half_up(v * new_h / old_h)]


def rescale_model_uvs(
    model: Union[ModelGeometry, Dict[str, Any], str],
    new_width: int,
    new_height: int,
) -> ModelGeometry:
    """
    Scale every cube UV of a model to a new atlas resolution.

    Used when a texture generator returns an image whose size differs from
    the packed atlas size. Returns a new model whose texture_size is
    [new_width, new_height].
    """
    if new_width <= 0 or new_height <= 0:
        raise ValueError(f"Atlas size must be positive, got {new_width}x{new_height}")

    model = parse_model(model)
    old_size = tuple(model.texture_size)
    new_size = (new_width, new_height)

    if old_size == new_size:
        return model

    count = 0
    for _, _, cube in model.iter_cubes():
        if cube.uv is not None:
            cube.uv = rescale_uv(cube.uv, old_size, new_size)
            count += 1

    model.texture_size = [new_width, new_height]

    logger.info(f"Rescaled {count} cube UVs from {old_size[0]}x{old_size[1]} to {new_width}x{new_height}")
    return model
