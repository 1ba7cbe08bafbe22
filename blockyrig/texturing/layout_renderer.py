"""
Atlas layout reference image.

Renders the packed box UV layout of a model as a painting guide for an
external texture generator: white background, every face filled with a
color coding its role and outlined in black.

Face colors:
    Top/Bottom (Y)  = light red / dark red
    Right/Left (X)  = light blue / dark blue
    Front/Back (Z)  = light green / dark green
"""

import base64
import logging
from io import BytesIO
from typing import Any, Dict, Optional, Union

from PIL import Image, ImageDraw

from blockyrig.schema.bonemodel import ModelGeometry, parse_model
from blockyrig.texturing.box_uv import density_scale, face_rects

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = '#FFFFFF'
OUTLINE_COLOR = '#000000'

FACE_COLORS = {
    'top': '#ffcccc',
    'bottom': '#cc0000',
    'right': '#ccccff',
    'front': '#ccffcc',
    'left': '#0000cc',
    'back': '#00cc00',
}


def render_layout(
    model: Union[ModelGeometry, Dict[str, Any], str],
    density: Optional[Union[str, int]] = None,
) -> Image.Image:
    """
    Draw the UV layout of every packed cube.

    Args:
        model: Bone model with packed UVs
        density: Density the UVs were packed at; defaults to the model's
            density_scale

    Returns:
        RGB image of the model's texture_size
    """
    model = parse_model(model)
    scale = density_scale(density) if density is not None else model.density_scale
    tex_w, tex_h = model.texture_size

    image = Image.new('RGB', (tex_w, tex_h), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)

    drawn = 0
    for _, _, cube in model.iter_cubes():
        if cube.uv is None or cube.is_degenerate():
            continue
        for face, rect in face_rects(cube.uv, cube.size, scale).items():
            # PIL rectangles are inclusive of the end pixel
            draw.rectangle(
                [rect.x, rect.y, rect.x + rect.width - 1, rect.y + rect.height - 1],
                fill=FACE_COLORS[face],
                outline=OUTLINE_COLOR,
            )
        drawn += 1

    logger.info(f"Rendered layout for {drawn} cubes ({tex_w}x{tex_h})")
    return image


def render_layout_png(
    model: Union[ModelGeometry, Dict[str, Any], str],
    density: Optional[Union[str, int]] = None,
) -> bytes:
    """Render the layout and encode it as PNG bytes."""
    buffer = BytesIO()
    render_layout(model, density).save(buffer, format='PNG')
    return buffer.getvalue()


def render_layout_data_url(
    model: Union[ModelGeometry, Dict[str, Any], str],
    density: Optional[Union[str, int]] = None,
) -> str:
    """Render the layout as a 'data:image/png;base64,...' URL."""
    png_b64 = base64.b64encode(render_layout_png(model, density)).decode('utf-8')
    return f"data:image/png;base64,{png_b64}"
