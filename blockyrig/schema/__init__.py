"""Bone model and BlockyModel schema definitions."""
from .bonemodel import (
    ModelGeometry,
    Bone,
    Cube,
    Attachment,
    AnimationDefinition,
    BoneAnimation,
    KeyframePost,
    parse_model,
)
from .blockymodel import (
    BlockyModel,
    Node,
    Shape,
    ShapeSettings,
    FaceLayout,
    Quaternion,
    Vector3,
)

__all__ = [
    "ModelGeometry",
    "Bone",
    "Cube",
    "Attachment",
    "AnimationDefinition",
    "BoneAnimation",
    "KeyframePost",
    "parse_model",
    "BlockyModel",
    "Node",
    "Shape",
    "ShapeSettings",
    "FaceLayout",
    "Quaternion",
    "Vector3",
]
