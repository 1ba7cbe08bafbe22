"""
Bone Model Schema: Absolute-Pivot Editing Format

COORDINATE SYSTEM:
Right-handed, Y-up, model units (1 unit = 1 texel at density 16x).

STRUCTURE:
- A model is an ordered list of bones plus the atlas size its UVs refer to.
- Bones reference their parent BY NAME. Names are unique within a model and
  the parent graph is a forest (validated at traversal time, see
  blockyrig.converters.hierarchy).
- Bone pivots are ABSOLUTE (world space), not relative to the parent.
- Cubes are owned by exactly one bone and are stored in absolute coordinates:
  'origin' is the minimum corner, 'size' the extent along x, y, z.
- Attachment points are stored RELATIVE to the owning bone's pivot.

ROTATIONS:
- Euler angles in degrees, [x, y, z].
- Bone rotation is relative to the parent's orientation (rotations compose
  down the chain).
- Cube rotation is applied about the cube pivot, which defaults to the cube
  center when absent.

UV LAYOUT:
- 'uv' is the top-left corner of the cube's box-UV footprint in atlas pixels.
- 'texture_size' and 'density_scale' record the atlas the UVs were packed
  into; the packer and rescaler keep them in sync with the cube UVs.

Example:
    {
      "identifier": "hytale.humanoid",
      "texture_size": [64, 64],
      "bones": [
        {"name": "root", "pivot": [0, 0, 0], "cubes": [],
         "attachments": [{"name": "ground", "position": [0, 0, 0]}]},
        {"name": "pelvis", "parent": "root", "pivot": [0, 12, 0],
         "cubes": [{"origin": [-4, 12, -2], "size": [8, 12, 4]}]}
      ]
    }
"""

from __future__ import annotations
import json
from typing import List, Optional, Union, Dict, Any
from pydantic import BaseModel, Field, ConfigDict, ValidationError, field_validator

from blockyrig.exceptions import StructuralError

# Type aliases for better readability
Vec3 = List[float]
UV2 = List[int]

DEFAULT_TEXTURE_SIZE = 64


#########################
# GEOMETRY MODELS
#########################

class Cube(BaseModel):
    """Axis-aligned box owned by a bone, in absolute model coordinates."""
    model_config = ConfigDict(extra='ignore')

    origin: Vec3 = Field(..., description="Minimum corner [x, y, z].", min_length=3, max_length=3)
    size: Vec3 = Field(..., description="Extent [w, h, d]. Must be positive to be packed.", min_length=3, max_length=3)
    rotation: Optional[Vec3] = Field(None, description="Euler degrees [x, y, z] about the cube pivot.", min_length=3, max_length=3)
    pivot: Optional[Vec3] = Field(None, description="ABSOLUTE rotation center; cube center when absent.", min_length=3, max_length=3)
    uv: Optional[UV2] = Field(None, description="Box-UV origin [u, v] in atlas pixels, assigned by the packer.", min_length=2, max_length=2)
    color: Optional[str] = Field(None, description="Display color, e.g. '#60a5fa'.")

    def center(self) -> List[float]:
        return [self.origin[i] + self.size[i] / 2 for i in range(3)]

    def effective_pivot(self) -> List[float]:
        """Absolute rotation center (explicit pivot, else the cube center)."""
        if self.pivot is not None:
            return list(self.pivot)
        return self.center()

    def is_degenerate(self) -> bool:
        return any(s <= 0 for s in self.size)


class Attachment(BaseModel):
    """Named anchor point, positioned relative to the owning bone's pivot."""
    model_config = ConfigDict(extra='ignore')

    name: str
    position: Vec3 = Field(default=[0, 0, 0], min_length=3, max_length=3)


class Bone(BaseModel):
    model_config = ConfigDict(extra='ignore')

    name: str = Field(..., description="Unique bone name.")
    parent: Optional[str] = Field(None, description="Parent bone NAME, or None for a root bone.")
    pivot: Vec3 = Field(..., description="ABSOLUTE pivot [x, y, z].", min_length=3, max_length=3)
    rotation: Optional[Vec3] = Field(None, description="Euler degrees [x, y, z], relative to parent orientation.", min_length=3, max_length=3)
    cubes: List[Cube] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)

    @field_validator('parent', mode='before')
    @classmethod
    def empty_parent_is_root(cls, v):
        # Editors emit "" for root bones
        return v or None

    @field_validator('attachments', mode='before')
    @classmethod
    def coerce_attachment_names(cls, v):
        if v is None:
            return []
        return [{'name': a} if isinstance(a, str) else a for a in v]


#########################
# ANIMATION MODELS
#########################

class KeyframePost(BaseModel):
    post: Vec3 = Field(..., min_length=3, max_length=3)
    lerp_mode: Optional[str] = None


KeyframeValue = Union[Vec3, KeyframePost]


class BoneAnimation(BaseModel):
    """Per-bone channels: timestamp in seconds (as string) -> keyframe."""
    position: Optional[Dict[str, KeyframeValue]] = None
    rotation: Optional[Dict[str, KeyframeValue]] = None
    scale: Optional[Dict[str, KeyframeValue]] = None


class AnimationDefinition(BaseModel):
    loop: bool = False
    animation_length: Optional[float] = Field(None, description="Length in seconds.")
    bones: Optional[Dict[str, BoneAnimation]] = None


#########################
# TOP-LEVEL MODEL
#########################

class ModelGeometry(BaseModel):
    model_config = ConfigDict(extra='ignore')

    identifier: str = Field('model', description="Model identifier, e.g. 'hytale.humanoid'.")
    format_version: Optional[str] = Field(None, description="Source format version, kept for round-trips.")
    texture_size: List[int] = Field(default=[DEFAULT_TEXTURE_SIZE, DEFAULT_TEXTURE_SIZE], description="Atlas [width, height] in pixels.", min_length=2, max_length=2)
    density_scale: int = Field(1, description="Texel density multiplier the UVs were packed at (1, 2 or 4).", gt=0)
    bones: List[Bone] = Field(default_factory=list)
    animations: Optional[Dict[str, AnimationDefinition]] = None

    @field_validator('texture_size')
    @classmethod
    def validate_texture_size(cls, v):
        if any(n <= 0 for n in v):
            raise ValueError("texture_size must be positive")
        return v

    def iter_cubes(self):
        """Yield (bone, cube_index, cube) in bone order, then cube order."""
        for bone in self.bones:
            for idx, cube in enumerate(bone.cubes):
                yield bone, idx, cube


def parse_model(data: Union[ModelGeometry, Dict[str, Any], str]) -> ModelGeometry:
    """
    Validate input model JSON and return an independent ModelGeometry.

    Accepts a ModelGeometry (deep-copied), a dict or a JSON string. A wrapper
    of the form {"bedrockData": {...}} is unwrapped.

    Raises:
        StructuralError: required fields missing or malformed. The offending
            bone/cube is named in the message and in ``error.node``.
    """
    if isinstance(data, ModelGeometry):
        return data.model_copy(deep=True)

    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise StructuralError(f"Invalid model JSON: {e}")

    if not isinstance(data, dict):
        raise StructuralError(f"Model must be a JSON object, got {type(data).__name__}")

    if 'bedrockData' in data and 'bones' not in data:
        wrapped = dict(data['bedrockData'] or {})
        if data.get('animations') is not None:
            wrapped.setdefault('animations', data['animations'])
        data = wrapped

    try:
        return ModelGeometry.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        node = _describe_location(data, first['loc'])
        raise StructuralError(f"Invalid model at {node}: {first['msg']}", node=node) from e


def _describe_location(data: Any, loc) -> str:
    """Render a pydantic error location using bone names where available."""
    parts = []
    current = data
    for key in loc:
        if isinstance(key, int) and parts:
            current = current[key] if isinstance(current, list) and key < len(current) else None
            name = current.get('name') if isinstance(current, dict) else None
            parts[-1] += f"[{name!r}]" if isinstance(name, str) else f"[{key}]"
            continue
        parts.append(str(key))
        current = current.get(key) if isinstance(current, dict) else None
    return '.'.join(parts) or '<root>'
