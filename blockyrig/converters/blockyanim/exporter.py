"""
Bone Model Animation → BlockyAnim Exporter

Keyframes in the bone model are keyed by time in seconds (as strings) with
Euler-degree rotations. The engine format is keyed by integer ticks and uses
quaternion orientations:

    {
      "duration": 20,
      "holdLastKeyframe": true,
      "nodeAnimations": {
        "head": {
          "position": [{"time": 0, "delta": {"x": 0, "y": 0, "z": 0}, "interpolationType": "smooth"}],
          "orientation": [{"time": 10, "delta": {"x": 0, "y": 0.26, "z": 0, "w": 0.97}, ...}],
          "shapeStretch": [], "shapeVisible": [], "shapeUvOffset": []
        }
      },
      "formatVersion": 1
    }
"""

import logging
import math
from typing import Any, Dict, List, Union

from blockyrig.converters.rotation_utils import EULER_ORDER, euler_to_quaternion
from blockyrig.schema.bonemodel import AnimationDefinition, KeyframePost, ModelGeometry, parse_model

logger = logging.getLogger(__name__)

ANIMATION_TICKS_PER_SECOND = 20
FORMAT_VERSION = 1
INTERPOLATION = 'smooth'


def _seconds_to_ticks(seconds: float) -> int:
    return math.ceil(seconds * ANIMATION_TICKS_PER_SECOND)


def _keyframe_vector(value) -> List[float]:
    if isinstance(value, KeyframePost):
        return list(value.post)
    return list(value)


def _sorted_frames(channel: Dict[str, Any]):
    return sorted(((float(t), v) for t, v in channel.items()), key=lambda frame: frame[0])


def _position_track(channel: Dict[str, Any]) -> List[Dict[str, Any]]:
    frames = []
    for time, value in _sorted_frames(channel):
        x, y, z = _keyframe_vector(value)
        frames.append({
            'time': _seconds_to_ticks(time),
            'delta': {'x': x, 'y': y, 'z': z},
            'interpolationType': INTERPOLATION,
        })
    return frames


def _orientation_track(channel: Dict[str, Any]) -> List[Dict[str, Any]]:
    frames = []
    for time, value in _sorted_frames(channel):
        w, x, y, z = euler_to_quaternion(_keyframe_vector(value), order=EULER_ORDER)
        frames.append({
            'time': _seconds_to_ticks(time),
            'delta': {'x': x, 'y': y, 'z': z, 'w': w},
            'interpolationType': INTERPOLATION,
        })
    return frames


def export_blockyanim(animation: Union[AnimationDefinition, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Convert one animation to a .blockyanim document.

    Scale channels have no engine counterpart and are dropped.
    """
    if not isinstance(animation, AnimationDefinition):
        animation = AnimationDefinition.model_validate(animation)

    length = animation.animation_length if animation.animation_length is not None else 1.0

    node_animations = {}
    for bone_name, bone_data in (animation.bones or {}).items():
        node_animations[bone_name] = {
            'position': _position_track(bone_data.position) if bone_data.position else [],
            'orientation': _orientation_track(bone_data.rotation) if bone_data.rotation else [],
            'shapeStretch': [],
            'shapeVisible': [],
            'shapeUvOffset': [],
        }
        if bone_data.scale:
            logger.debug(f"Dropping scale channel of '{bone_name}' (not supported by .blockyanim)")

    return {
        'duration': _seconds_to_ticks(length),
        'holdLastKeyframe': bool(animation.loop),
        'nodeAnimations': node_animations,
        'formatVersion': FORMAT_VERSION,
    }


def export_animations(model: Union[ModelGeometry, Dict[str, Any], str]) -> Dict[str, Dict[str, Any]]:
    """Convert every animation of a model. Returns animation name -> document."""
    model = parse_model(model)
    documents = {name: export_blockyanim(anim) for name, anim in (model.animations or {}).items()}
    logger.info(f"Exported {len(documents)} animations to BlockyAnim")
    return documents
