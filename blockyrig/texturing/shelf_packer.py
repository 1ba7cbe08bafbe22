"""
Shelf Rectangle Packer

Packs box UV footprints into a square atlas, left-to-right and top-to-bottom
in rows ("shelves"). The atlas grows instead of failing when an item does not
fit, so packing never errors on valid input.

Deterministic: the same ordered input always yields the same layout, which
keeps re-exports stable after cosmetic edits.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

PADDING = 2  # Pixels between footprints, prevents filtering bleed
MIN_TEXTURE_SIZE = 64
AREA_SLACK = 1.5  # Initial atlas area over total footprint area


@dataclass
class PackItem:
    """A footprint to place. id can be any hashable key."""
    id: Any
    width: int
    height: int


@dataclass
class PackResult:
    positions: Dict[Any, Tuple[int, int]] = field(default_factory=dict)
    atlas_size: int = MIN_TEXTURE_SIZE
    growth_steps: int = 0  # Times the atlas had to grow after the initial estimate


def initial_atlas_size(items: List[PackItem], min_size: int = MIN_TEXTURE_SIZE) -> int:
    """Smallest min_size * 2^k whose square holds AREA_SLACK times the total area."""
    total_area = sum(item.width * item.height for item in items)
    dim = min_size
    while dim * dim < total_area * AREA_SLACK:
        dim *= 2
    return dim


class ShelfPacker:
    """Greedy shelf packer with a single cursor and a growable atlas."""

    def __init__(self, width: int, height: int, padding: int = PADDING):
        self.width = width
        self.height = height
        self.padding = padding
        self.x = 0
        self.y = 0
        self.row_height = 0
        self.growth_steps = 0

    def place(self, item: PackItem) -> Tuple[int, int]:
        """Place one item at the cursor, growing the atlas if needed."""
        while item.width > self.width:
            self.width *= 2
            self.growth_steps += 1
            logger.info(f"Atlas overflow: '{item.id}' is {item.width}px wide, growing width to {self.width}")

        if self.x > 0 and self.x + item.width > self.width:
            # New row
            self.x = 0
            self.y += self.row_height + self.padding
            self.row_height = 0

        while self.y + item.height > self.height:
            self.height *= 2
            self.growth_steps += 1
            logger.info(f"Atlas overflow: '{item.id}' does not fit below y={self.y}, growing height to {self.height}")

        position = (self.x, self.y)

        self.x += item.width + self.padding
        self.row_height = max(self.row_height, item.height)
        return position


def pack(items: List[PackItem], padding: int = PADDING, min_size: int = MIN_TEXTURE_SIZE) -> PackResult:
    """
    Pack footprints into a square atlas.

    Items are sorted by height, tallest first; ties keep their input order.

    Args:
        items: Footprints to place
        padding: Gap in pixels between neighbouring footprints
        min_size: Smallest atlas side

    Returns:
        PackResult with id -> (u, v) positions and the square atlas side
    """
    if not items:
        return PackResult(positions={}, atlas_size=min_size, growth_steps=0)

    sorted_items = sorted(items, key=lambda item: -item.height)

    dim = initial_atlas_size(items, min_size)
    packer = ShelfPacker(dim, dim, padding)

    positions = {}
    for item in sorted_items:
        positions[item.id] = packer.place(item)

    # Force square output
    atlas_size = max(packer.width, packer.height)

    logger.debug(f"Packed {len(items)} footprints into {atlas_size}x{atlas_size} "
                 f"(initial {dim}, {packer.growth_steps} growth steps)")
    return PackResult(positions=positions, atlas_size=atlas_size, growth_steps=packer.growth_steps)
