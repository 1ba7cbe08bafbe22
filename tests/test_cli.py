"""
Tests for BlockyRig CLI

These tests verify the CLI command structure, file output and error handling.
"""

import json

from click.testing import CliRunner
from PIL import Image

from blockyrig.cli import cli


def write_model(path, data=None):
    data = data or {
        'identifier': 'hytale.humanoid',
        'bones': [
            {'name': 'root', 'pivot': [0, 0, 0]},
            {'name': 'pelvis', 'parent': 'root', 'pivot': [0, 12, 0],
             'cubes': [{'origin': [-4, 12, -2], 'size': [8, 12, 4]}]},
            {'name': 'head', 'parent': 'pelvis', 'pivot': [0, 24, 0],
             'cubes': [{'origin': [-4, 24, -4], 'size': [8, 8, 8]}]},
        ],
        'animations': {
            'animation.look:left': {'loop': True, 'animation_length': 0.5,
                                    'bones': {'head': {'rotation': {'0.0': [0, 0, 0], '0.5': [0, 45, 0]}}}},
        },
    }
    path.write_text(json.dumps(data))
    return str(path)


class TestCLI:
    """Test CLI command structure and basic functionality"""

    def test_cli_help(self):
        """Test that CLI help works"""
        runner = CliRunner()
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'BlockyRig' in result.output
        for command in ('pack', 'rescale', 'layout', 'convert', 'animations'):
            assert command in result.output

    def test_cli_version(self):
        """Test that version flag works"""
        runner = CliRunner()
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0

    def test_pack_help(self):
        """Test that pack command help lists the density tiers"""
        runner = CliRunner()
        result = runner.invoke(cli, ['pack', '--help'])
        assert result.exit_code == 0
        assert '--density' in result.output
        assert '32x' in result.output

    def test_pack_missing_output(self):
        """Test that pack command requires output flag"""
        runner = CliRunner()
        result = runner.invoke(cli, ['pack', 'model.json'])
        assert result.exit_code != 0
        assert 'output' in result.output.lower() or 'required' in result.output.lower()

    def test_pack_invalid_density(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ['pack', write_model(tmp_path / 'm.json'), '-o', 'x.json', '--density', '8x'])
        assert result.exit_code != 0


class TestCommands:
    """Test the commands end to end on temporary files"""

    def test_pack(self, tmp_path):
        out = tmp_path / 'packed.json'
        runner = CliRunner()
        result = runner.invoke(cli, ['pack', write_model(tmp_path / 'm.json'), '-o', str(out), '--density', '16x'])
        assert result.exit_code == 0, result.output
        assert '64x64' in result.output

        data = json.loads(out.read_text())
        assert data['texture_size'] == [64, 64]
        assert data['bones'][1]['cubes'][0]['uv'] == [0, 0]
        assert data['bones'][2]['cubes'][0]['uv'] == [26, 0]

    def test_pack_reports_skipped_cubes(self, tmp_path):
        model = {'bones': [{'name': 'flat', 'pivot': [0, 0, 0],
                            'cubes': [{'origin': [0, 0, 0], 'size': [4, 0, 4]}]}]}
        runner = CliRunner()
        result = runner.invoke(cli, ['pack', write_model(tmp_path / 'm.json', model), '-o', str(tmp_path / 'p.json')])
        assert result.exit_code == 0
        assert 'Skipped' in result.output

    def test_pack_to_blockymodel(self, tmp_path):
        out = tmp_path / 'packed.blockymodel'
        runner = CliRunner()
        result = runner.invoke(cli, ['pack', write_model(tmp_path / 'm.json'), '-o', str(out)])
        assert result.exit_code == 0, result.output
        doc = json.loads(out.read_text())
        head_box = doc['nodes'][0]['children'][0]['children'][1]['children'][0]
        assert head_box['shape']['textureLayout']['top']['offset'] == {'x': 34, 'y': 0}

    def test_rescale(self, tmp_path):
        packed = tmp_path / 'packed.json'
        out = tmp_path / 'rescaled.json'
        runner = CliRunner()
        runner.invoke(cli, ['pack', write_model(tmp_path / 'm.json'), '-o', str(packed)])
        result = runner.invoke(cli, ['rescale', str(packed), '-o', str(out), '--width', '128'])
        assert result.exit_code == 0, result.output

        data = json.loads(out.read_text())
        assert data['texture_size'] == [128, 128]
        assert data['bones'][2]['cubes'][0]['uv'] == [52, 0]

    def test_rescale_rejects_zero(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ['rescale', write_model(tmp_path / 'm.json'), '-o', str(tmp_path / 'o.json'),
                                     '--width', '0'])
        assert result.exit_code == 1
        assert 'Error' in result.output

    def test_layout(self, tmp_path):
        packed = tmp_path / 'packed.json'
        out = tmp_path / 'layout.png'
        runner = CliRunner()
        runner.invoke(cli, ['pack', write_model(tmp_path / 'm.json'), '-o', str(packed)])
        result = runner.invoke(cli, ['layout', str(packed), '-o', str(out)])
        assert result.exit_code == 0, result.output
        assert Image.open(out).size == (64, 64)

    def test_layout_from_blockymodel(self, tmp_path):
        """Layout of a .blockymodel packed at 32x matches the layout of the packed JSON"""
        src = write_model(tmp_path / 'm.json')
        runner = CliRunner()
        runner.invoke(cli, ['pack', src, '-o', str(tmp_path / 'p.json'), '--density', '32x'])
        runner.invoke(cli, ['pack', src, '-o', str(tmp_path / 'p.blockymodel'), '--density', '32x'])

        result = runner.invoke(cli, ['layout', str(tmp_path / 'p.blockymodel'), '-o', str(tmp_path / 'b.png')])
        assert result.exit_code == 0, result.output
        runner.invoke(cli, ['layout', str(tmp_path / 'p.json'), '-o', str(tmp_path / 'j.png')])

        from_blocky = Image.open(tmp_path / 'b.png')
        from_json = Image.open(tmp_path / 'j.png')
        assert from_blocky.size == from_json.size == (128, 128)
        assert list(from_blocky.getdata()) == list(from_json.getdata())

    def test_convert(self, tmp_path):
        out = tmp_path / 'steve.blockymodel'
        runner = CliRunner()
        result = runner.invoke(cli, ['convert', write_model(tmp_path / 'steve.json'), str(out)])
        assert result.exit_code == 0, result.output
        assert 'Success' in result.output
        assert json.loads(out.read_text())['nodes'][0]['name'] == 'root'

    def test_convert_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ['convert', str(tmp_path / 'missing.json'), str(tmp_path / 'o.blockymodel')])
        assert result.exit_code == 1
        assert 'not found' in result.output.lower()

    def test_convert_structural_error(self, tmp_path):
        model = {'bones': [{'name': 'arm', 'parent': 'body', 'pivot': [0, 0, 0]}]}
        runner = CliRunner()
        result = runner.invoke(cli, ['convert', write_model(tmp_path / 'm.json', model), str(tmp_path / 'o.blockymodel')])
        assert result.exit_code == 1
        assert 'Structural Error' in result.output
        assert 'body' in result.output

    def test_animations(self, tmp_path):
        out_dir = tmp_path / 'anims'
        runner = CliRunner()
        result = runner.invoke(cli, ['animations', write_model(tmp_path / 'm.json'), str(out_dir)])
        assert result.exit_code == 0, result.output

        path = out_dir / 'animation.look_left.blockyanim'
        assert path.exists()
        doc = json.loads(path.read_text())
        assert doc['duration'] == 10
        assert doc['holdLastKeyframe'] is True
