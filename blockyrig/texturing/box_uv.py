"""
Box UV geometry for cuboids.

Every cube is unwrapped into a single "box UV" footprint. The same layout is
used by the packer, the layout renderer and the .blockymodel texture layout,
so faces always sample the region the packer reserved for them.

Box UV footprint layout (per cube, origin (u, v) at the top-left):
          +-----+-----+
          | Top | Bot |                ← d_px tall
    +-----+-----+-----+-----+
    |  R  | Fr  |  L  | Bk  |          ← h_px tall
    +-----+-----+-----+-----+
      D     W     D     W

    footprint width  = 2 * (w_px + d_px)
    footprint height = d_px + h_px
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Set, Tuple, Union

from blockyrig.exceptions import DegenerateGeometryError

# Pixel density tiers:
# 16x = 1 px/unit (standard), 32x = 2 px/unit (props), 64x = 4 px/unit (avatars)
DENSITY_SCALES = {
    '16x': 1,
    '32x': 2,
    '64x': 4,
}


@dataclass(frozen=True)
class FaceRect:
    """Pixel rectangle of one face in atlas space."""
    x: int
    y: int
    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


def density_scale(density: Union[str, int]) -> int:
    """Resolve a density tier name ('16x', '32x', '64x') or a positive integer multiplier."""
    if isinstance(density, str):
        if density not in DENSITY_SCALES:
            raise ValueError(f"Unknown density '{density}'. Expected one of: {', '.join(DENSITY_SCALES)}")
        return DENSITY_SCALES[density]
    if isinstance(density, bool) or not isinstance(density, (int, float)) or density <= 0 or density != int(density):
        raise ValueError(f"Density scale must be a positive integer, got {density!r}")
    return int(density)


def scaled_dimensions(size: List[float], scale: float) -> Tuple[int, int, int]:
    """
    Pixel dimensions (w_px, h_px, d_px) of a cube at the given density scale.

    Raises:
        DegenerateGeometryError: if any size component is zero or negative
    """
    if any(s <= 0 for s in size):
        raise DegenerateGeometryError(f"Cube size {list(size)} has a non-positive component", size=list(size))
    w, h, d = size
    return math.ceil(w * scale), math.ceil(h * scale), math.ceil(d * scale)


def footprint(size: List[float], scale: float = 1) -> Tuple[int, int]:
    """Return the (width, height) of a cube's unfolded six-face layout."""
    w_px, h_px, d_px = scaled_dimensions(size, scale)
    return 2 * (w_px + d_px), d_px + h_px


def face_rects(origin: List[int], size: List[float], scale: float = 1) -> Dict[str, FaceRect]:
    """
    Get the atlas rectangle of each face for a footprint placed at origin.

    Returns:
        Dict mapping face name to FaceRect(x, y, width, height)
    """
    u, v = origin
    w_px, h_px, d_px = scaled_dimensions(size, scale)

    # Row 0: top and bottom, d_px tall
    # Row 1: right, front, left, back, h_px tall
    row_y = v + d_px

    return {
        'top':    FaceRect(u + d_px, v, w_px, d_px),
        'bottom': FaceRect(u + d_px + w_px, v, w_px, d_px),
        'right':  FaceRect(u, row_y, d_px, h_px),
        'front':  FaceRect(u + d_px, row_y, w_px, h_px),
        'left':   FaceRect(u + d_px + w_px, row_y, d_px, h_px),
        'back':   FaceRect(u + d_px + w_px + d_px, row_y, w_px, h_px),
    }


def texture_layout(origin: List[int], size: List[float], scale: float = 1) -> Dict[str, Dict]:
    """Per-face .blockymodel textureLayout records for a footprint at origin."""
    return {
        face: {
            'offset': {'x': rect.x, 'y': rect.y},
            'mirror': {'x': False, 'y': False},
            'angle': 0,
        }
        for face, rect in face_rects(origin, size, scale).items()
    }


def uv_from_texture_layout(layout: Dict[str, Dict]) -> List[int]:
    """
    Recover the footprint origin from a textureLayout.

    The right face sits at (u, v + d) and the top face at (u + d, v), so the
    origin is (right.x, top.y) regardless of density.
    """
    right = _offset(layout.get('right'))
    top = _offset(layout.get('top'))
    return [int(round(right['x'])), int(round(top['y']))]


def layout_density_candidates(layout: Dict[str, Dict], size: List[float]) -> Set[int]:
    """
    Integer density scales under which layout is the box UV of a cube of size.

    The top face starts d_px right of the right face and the bottom face w_px
    right of the top face, so a scale s fits when ceil(d * s) and ceil(w * s)
    reproduce those gaps.
    """
    right = _offset(layout.get('right'))
    top = _offset(layout.get('top'))
    bottom = _offset(layout.get('bottom'))
    d_px = int(round(top['x'] - right['x']))
    w_px = int(round(bottom['x'] - top['x']))

    w, _, d = size
    if d_px <= 0 or w_px <= 0 or w <= 0 or d <= 0:
        return set()

    # ceil(d * s) == d_px needs d * s <= d_px
    upper = int(d_px / d) + 1
    return {
        s for s in range(1, upper + 1)
        if math.ceil(w * s) == w_px and math.ceil(d * s) == d_px
    }


def _offset(face) -> Dict[str, float]:
    if face is None:
        return {'x': 0, 'y': 0}
    if hasattr(face, 'offset'):
        return {'x': face.offset.x, 'y': face.offset.y}
    offset = face.get('offset') or {}
    return {'x': offset.get('x', 0), 'y': offset.get('y', 0)}
