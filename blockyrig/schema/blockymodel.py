"""
BlockyModel Schema: Parent-Relative Node Tree

The engine's native .blockymodel format. Unlike the bone model, every node
stores its position RELATIVE to its immediate parent node, and orientation
as a unit quaternion {x, y, z, w}.

Hierarchy is expressed by nesting ('children'), not by parent ids.

Node kinds (distinguished by the shape descriptor):
- Bone/container: shape.type == "none", settings.isPiece false or absent
- Box (cube):     shape.type == "box", settings.size carries the extent,
                  textureLayout carries one record per face
- Attachment:     shape.type == "none", settings.isPiece == true

Storage:
    {
      "nodes": [
        {"id": "1", "name": "root", "position": {"x": 0, "y": 0, "z": 0},
         "orientation": {"x": 0, "y": 0, "z": 0, "w": 1},
         "shape": {"type": "none", ...}, "children": [...]}
      ],
      "lod": "auto"
    }

Field names are camelCase on the wire and snake_case in Python; always dump
with by_alias=True.
"""

from __future__ import annotations
from typing import List, Optional, Dict
from pydantic import BaseModel, Field, ConfigDict

SHAPE_BOX = 'box'
SHAPE_NONE = 'none'


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class Vector3(WireModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def of(cls, values) -> "Vector3":
        x, y, z = values
        return cls(x=x, y=y, z=z)

    def as_list(self) -> List[float]:
        return [self.x, self.y, self.z]


class Vector2(WireModel):
    x: float = 0.0
    y: float = 0.0


class Quaternion(WireModel):
    """Unit quaternion in wire order {x, y, z, w}."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def from_wxyz(cls, quat) -> "Quaternion":
        w, x, y, z = quat
        return cls(x=x, y=y, z=z, w=w)

    def as_wxyz(self) -> List[float]:
        return [self.w, self.x, self.y, self.z]


class Mirror(WireModel):
    x: bool = False
    y: bool = False


class FaceLayout(WireModel):
    offset: Vector2 = Field(default_factory=Vector2)
    mirror: Mirror = Field(default_factory=Mirror)
    angle: int = 0


class ShapeSettings(WireModel):
    size: Optional[Vector3] = None
    is_piece: Optional[bool] = Field(None, alias='isPiece')


class Shape(WireModel):
    type: str = SHAPE_NONE
    offset: Vector3 = Field(default_factory=Vector3)
    stretch: Vector3 = Field(default_factory=lambda: Vector3(x=1, y=1, z=1))
    settings: ShapeSettings = Field(default_factory=ShapeSettings)
    texture_layout: Dict[str, FaceLayout] = Field(default_factory=dict, alias='textureLayout')
    unwrap_mode: str = Field('custom', alias='unwrapMode')
    visible: bool = True
    double_sided: bool = Field(False, alias='doubleSided')
    shading_mode: str = Field('flat', alias='shadingMode')


class Node(WireModel):
    id: str
    name: str
    children: List["Node"] = Field(default_factory=list)
    position: Vector3 = Field(default_factory=Vector3)
    orientation: Quaternion = Field(default_factory=Quaternion)
    shape: Shape = Field(default_factory=Shape)


class BlockyModel(WireModel):
    nodes: List[Node] = Field(default_factory=list)
    lod: str = 'auto'


# Rebuild models for forward references
Node.model_rebuild()
BlockyModel.model_rebuild()
