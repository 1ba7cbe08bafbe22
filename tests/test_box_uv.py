"""
Tests for box UV geometry (footprints and face rectangles)
"""
import math

import pytest

from blockyrig.exceptions import DegenerateGeometryError
from blockyrig.texturing.box_uv import (
    density_scale,
    face_rects,
    footprint,
    texture_layout,
    uv_from_texture_layout,
)


class TestDensityScale:
    """Test density tier resolution"""

    def test_named_tiers(self):
        assert density_scale('16x') == 1
        assert density_scale('32x') == 2
        assert density_scale('64x') == 4

    def test_integer_multiplier_passes_through(self):
        assert density_scale(3) == 3

    @pytest.mark.parametrize('bad', ['128x', 0, -2, 1.5, True])
    def test_invalid_density_rejected(self, bad):
        with pytest.raises(ValueError):
            density_scale(bad)


class TestFootprint:
    """Test the unfolded six-face footprint size"""

    def test_footprint_formula_for_all_tiers(self):
        """Width is 2*(w+d) and height is d+h after ceiling at every tier"""
        sizes = [(8, 8, 8), (1, 1, 1), (0.5, 3.25, 7), (4, 12, 4), (2.1, 0.9, 5.5), (33, 1, 17)]
        for size in sizes:
            for s in (1, 2, 4):
                w, h, d = size
                fw, fh = footprint(list(size), s)
                assert fh == math.ceil(d * s) + math.ceil(h * s)
                assert fw == 2 * (math.ceil(w * s) + math.ceil(d * s))

    def test_single_cube_footprint(self):
        """An 8x8x8 cube at 1x occupies 32x16"""
        assert footprint([8, 8, 8], 1) == (32, 16)

    def test_fractional_sizes_round_up(self):
        # rw=7, rh=4, rd=ceil(2.4)=3
        assert footprint([3.5, 2, 1.2], 2) == (20, 7)

    @pytest.mark.parametrize('size', [[0, 4, 4], [4, -1, 4], [4, 4, 0]])
    def test_degenerate_size_raises(self, size):
        with pytest.raises(DegenerateGeometryError) as exc_info:
            footprint(size, 1)
        assert exc_info.value.size == size


class TestFaceRects:
    """Test face rectangle placement inside a footprint"""

    def test_single_cube_face_rects(self):
        """8x8x8 cube at (0, 0), density 1x"""
        rects = {face: rect.as_tuple() for face, rect in face_rects([0, 0], [8, 8, 8], 1).items()}
        assert rects == {
            'top': (8, 0, 8, 8),
            'bottom': (16, 0, 8, 8),
            'right': (0, 8, 8, 8),
            'front': (8, 8, 8, 8),
            'left': (16, 8, 8, 8),
            'back': (24, 8, 8, 8),
        }

    def test_face_dimensions_follow_axes(self):
        """top/bottom are w x d, left/right d x h, front/back w x h"""
        rects = face_rects([5, 7], [4, 12, 2], 2)
        rw, rh, rd = 8, 24, 4
        assert (rects['top'].width, rects['top'].height) == (rw, rd)
        assert (rects['bottom'].width, rects['bottom'].height) == (rw, rd)
        assert (rects['left'].width, rects['left'].height) == (rd, rh)
        assert (rects['right'].width, rects['right'].height) == (rd, rh)
        assert (rects['front'].width, rects['front'].height) == (rw, rh)
        assert (rects['back'].width, rects['back'].height) == (rw, rh)
        assert (rects['right'].x, rects['right'].y) == (5, 7 + rd)
        assert (rects['back'].x, rects['back'].y) == (5 + rd + rw + rd, 7 + rd)

    def test_faces_stay_inside_footprint_without_overlap(self):
        u, v = 10, 3
        size = [3, 5, 7]
        fw, fh = footprint(size, 2)
        rects = list(face_rects([u, v], size, 2).values())

        for r in rects:
            assert u <= r.x and r.x + r.width <= u + fw
            assert v <= r.y and r.y + r.height <= v + fh

        for i, a in enumerate(rects):
            for b in rects[i + 1:]:
                disjoint = (a.x + a.width <= b.x or b.x + b.width <= a.x or
                            a.y + a.height <= b.y or b.y + b.height <= a.y)
                assert disjoint


class TestTextureLayout:
    """Test .blockymodel per-face texture layout records"""

    def test_layout_offsets_match_face_rects(self):
        layout = texture_layout([10, 20], [4, 6, 2], 2)
        rects = face_rects([10, 20], [4, 6, 2], 2)
        assert set(layout) == set(rects)
        for face, record in layout.items():
            assert record['offset'] == {'x': rects[face].x, 'y': rects[face].y}
            assert record['mirror'] == {'x': False, 'y': False}
            assert record['angle'] == 0

    def test_uv_recovered_from_layout(self):
        """Origin is (right.x, top.y) at any density"""
        for s in (1, 2, 4):
            layout = texture_layout([10, 20], [4, 6, 2], s)
            assert uv_from_texture_layout(layout) == [10, 20]
