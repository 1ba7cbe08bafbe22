"""
BlockyRig CLI - Command-line interface for packing and converting bone models
"""

import json
import logging
import os
import re
import sys
from pathlib import Path

import click

from blockyrig.converters.blockyanim import export_animations
from blockyrig.converters.convert import convert as convert_model, load_model, save_model
from blockyrig.exceptions import StructuralError
from blockyrig.texturing import pack_model_uvs, render_layout, rescale_model_uvs
from blockyrig.texturing.box_uv import DENSITY_SCALES


def _configure_logging(verbose):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(name)s: %(message)s")


def _fail(prefix, error, verbose=False):
    click.secho(f"{prefix}: {error}", fg='red', err=True)
    if verbose:
        import traceback
        traceback.print_exc()
    sys.exit(1)


def _run(action, verbose):
    """Run a command body with the shared error reporting."""
    try:
        action()
    except FileNotFoundError as e:
        _fail("Error", e)
    except StructuralError as e:
        _fail("Structural Error", e)
    except ValueError as e:
        _fail("Error", e)
    except Exception as e:
        _fail("Unexpected error", e, verbose)


@click.group()
@click.version_option()
def cli():
    """
    BlockyRig - Pack box UV atlases and convert bone models.

    Examples:
        blockyrig pack steve.json -o steve.packed.json --density 32x
        blockyrig convert steve.json steve.blockymodel
    """
    pass


@cli.command()
@click.argument('input_path')
@click.option('-o', '--output', required=True, help='Output file path (.json or .blockymodel)')
@click.option('--density', type=click.Choice(list(DENSITY_SCALES)), default='16x', show_default=True,
              help='Texel density tier')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed packing info')
def pack(input_path, output, density, verbose):
    """
    Pack every cube of a model into a square box UV atlas.

    Examples:
        blockyrig pack steve.json -o steve.packed.json
        blockyrig pack steve.json -o steve.blockymodel --density 64x
    """
    _configure_logging(verbose)

    def action():
        result = pack_model_uvs(load_model(input_path), density)
        save_model(result.model, output)
        for error in result.skipped:
            click.secho(f"Skipped: {error}", fg='yellow', err=True)
        click.secho(f"✓ Packed into {result.atlas_size}x{result.atlas_size} atlas, saved to {output}", fg='green')

    _run(action, verbose)


@cli.command()
@click.argument('input_path')
@click.option('-o', '--output', required=True, help='Output file path (.json or .blockymodel)')
@click.option('--width', type=int, required=True, help='New atlas width in pixels')
@click.option('--height', type=int, default=None, help='New atlas height in pixels (default: width)')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed rescale info')
def rescale(input_path, output, width, height, verbose):
    """
    Rescale cube UVs to a new atlas resolution.

    Example:
        blockyrig rescale steve.json -o steve.1024.json --width 1024
    """
    _configure_logging(verbose)

    def action():
        model = rescale_model_uvs(load_model(input_path), width, height or width)
        save_model(model, output)
        w, h = model.texture_size
        click.secho(f"✓ Rescaled UVs to {w}x{h}, saved to {output}", fg='green')

    _run(action, verbose)


@cli.command()
@click.argument('input_path')
@click.option('-o', '--output', required=True, help='Output image path (.png)')
@click.option('--density', type=click.Choice(list(DENSITY_SCALES)), default=None,
              help='Density the UVs were packed at (default: the model\'s)')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed render info')
def layout(input_path, output, density, verbose):
    """
    Render the UV layout reference image of a packed model.

    Example:
        blockyrig layout steve.packed.json -o steve_layout.png
    """
    _configure_logging(verbose)

    def action():
        image = render_layout(load_model(input_path), density)
        image.save(output, format='PNG')
        click.secho(f"✓ Layout saved to {output}", fg='green')

    _run(action, verbose)


@cli.command()
@click.argument('input_path')
@click.argument('output_path')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed conversion info')
def convert(input_path, output_path, verbose):
    """
    Convert a model from one format to another.

    Supported formats: .json, .blockymodel

    Examples:
        blockyrig convert steve.json steve.blockymodel
        blockyrig convert steve.blockymodel steve.json
    """
    _configure_logging(verbose)

    def action():
        if verbose:
            click.echo(f"Converting: {input_path} → {output_path}")
        convert_model(input_path, output_path)
        click.secho(f"✓ Success! Converted to {output_path}", fg='green')

    _run(action, verbose)


@cli.command()
@click.argument('input_path')
@click.argument('output_dir')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed export info')
def animations(input_path, output_dir, verbose):
    """
    Export the animations of a model as .blockyanim files.

    Example:
        blockyrig animations steve.json out/animations
    """
    _configure_logging(verbose)

    def action():
        documents = export_animations(load_model(input_path))
        Path(output_dir).mkdir(parents=True, exist_ok=True)
        for name, document in documents.items():
            path = os.path.join(output_dir, f"{re.sub(r'[:/]', '_', name)}.blockyanim")
            with open(path, 'w') as f:
                json.dump(document, f, indent=2)
            if verbose:
                click.echo(f"  {path}")
        click.secho(f"✓ Exported {len(documents)} animations to {output_dir}", fg='green')

    _run(action, verbose)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
