"""
Format conversion utilities

Converts models between the bone model JSON and the engine's .blockymodel
format on disk.
"""

import json
import logging
import os

from blockyrig.converters.blockymodel import export_blockymodel, import_blockymodel
from blockyrig.schema.bonemodel import ModelGeometry, parse_model

logger = logging.getLogger(__name__)


def convert(input_path: str, output_path: str) -> None:
    """
    Convert a model from one format to another.

    Automatically detects input and output formats from file extensions.
    Supports: .json (bone model), .blockymodel (engine node tree)

    Args:
        input_path: Path to input file
        output_path: Path to output file

    Raises:
        FileNotFoundError: If input file doesn't exist
        ValueError: If format is unsupported
        StructuralError: If the input model is malformed

    Examples:
        >>> convert("steve.json", "steve.blockymodel")
        >>> convert("steve.blockymodel", "steve.json")
    """
    model = load_model(input_path)
    save_model(model, output_path)
    logger.info(f"Converted {input_path} -> {output_path}")


def load_model(path: str) -> ModelGeometry:
    """Load a bone model from .json or .blockymodel"""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")

    format = _detect_format(path)
    with open(path, 'r') as f:
        text = f.read()

    if format == 'json':
        return parse_model(text)

    elif format == 'blockymodel':
        identifier = os.path.splitext(os.path.basename(path))[0]
        return import_blockymodel(text, options={'identifier': identifier})

    else:
        raise ValueError(f"Unsupported input format: {format}")


def save_model(model: ModelGeometry, path: str) -> None:
    """Save a bone model as .json or .blockymodel"""
    format = _detect_format(path)

    if format == 'json':
        with open(path, 'w') as f:
            json.dump(model.model_dump(exclude_none=True), f, indent=2)

    elif format == 'blockymodel':
        blockymodel_str = export_blockymodel(model)
        with open(path, 'w') as f:
            f.write(blockymodel_str)

    else:
        raise ValueError(f"Unsupported output format: {format}")


def _detect_format(path: str) -> str:
    """Detect format from file extension"""
    ext = os.path.splitext(path)[1].lower()

    format_map = {
        '.json': 'json',
        '.blockymodel': 'blockymodel',
    }

    if ext not in format_map:
        raise ValueError(
            f"Unsupported file format: {ext}. "
            f"Supported: .json, .blockymodel"
        )

    return format_map[ext]
