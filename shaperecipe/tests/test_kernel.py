"""Tests for the trimesh-backed geometry kernel."""

import math
import pytest
import trimesh

from shaperecipe import kernel


def box(size, center=None):
    return kernel.make_cuboid(size, center=center)


class TestMakeCuboid:
    @pytest.mark.parametrize("size", [[-1, 1, 1], [1, -0.5, 1], [1, 1, -2]])
    def test_negative_size_rejected(self, size):
        with pytest.raises(ValueError, match="size values must be positive"):
            kernel.make_cuboid(size)

    def test_zero_size_allowed(self):
        bb = kernel.measure_bounding_box(kernel.make_cuboid([0, 2, 2]))
        assert bb[0] == pytest.approx([0, -1, -1])
        assert bb[1] == pytest.approx([0, 1, 1])


class TestPurity:
    def test_translate_does_not_mutate_input(self):
        mesh = box([2, 2, 2])
        before = kernel.measure_bounding_box(mesh)
        kernel.translate([5, 0, 0], mesh)
        assert kernel.measure_bounding_box(mesh) == before

    def test_rotate_does_not_mutate_input(self):
        mesh = box([2, 4, 6])
        before = kernel.measure_bounding_box(mesh)
        kernel.rotate([math.pi / 2, 0, 0], mesh)
        assert kernel.measure_bounding_box(mesh) == before

    def test_scale_does_not_mutate_input(self):
        mesh = box([2, 2, 2])
        before = kernel.measure_bounding_box(mesh)
        kernel.scale([3, 3, 3], mesh)
        assert kernel.measure_bounding_box(mesh) == before


class TestSubtractChain:
    def test_differences_applied_left_to_right(self, monkeypatch):
        calls = []
        outputs = []

        def fake_difference(meshes, engine=None, **kwargs):
            calls.append(list(meshes))
            out = trimesh.creation.box(extents=[1, 1, 1])
            outputs.append(out)
            return out

        monkeypatch.setattr(kernel.trimesh.boolean, "difference", fake_difference)
        a, b, c = box([4, 4, 4]), box([1, 1, 1]), box([2, 2, 2])
        result = kernel.subtract_chain(a, [b, c])

        assert len(calls) == 2
        assert len(calls[0]) == 2 and calls[0][1] is b
        assert calls[1][0] is outputs[0] and calls[1][1] is c
        assert result is outputs[1]

    def test_no_others_returns_copy_of_base(self):
        a = box([2, 2, 2])
        result = kernel.subtract_chain(a, [])
        assert result is not a
        assert kernel.measure_bounding_box(result) == kernel.measure_bounding_box(a)


class TestMeasureBoundingBox:
    def test_plain_floats(self):
        bb = kernel.measure_bounding_box(box([2, 4, 6], center=[1, 1, 1]))
        assert bb == [[0.0, -1.0, -2.0], [2.0, 3.0, 4.0]]
        assert all(type(v) is float for row in bb for v in row)


def test_kernel_info():
    info = kernel.kernel_info()
    assert info["trimesh"] == trimesh.__version__
    assert "manifold3d" in info
    assert info["boolean_engine"] == "manifold"


def test_default_segments_used(monkeypatch):
    seen = {}

    def fake_cylinder(radius, height, sections):
        seen["sections"] = sections
        return trimesh.creation.box(extents=[1, 1, 1])

    monkeypatch.setattr(kernel.trimesh.creation, "cylinder", fake_cylinder)
    kernel.make_cylinder(10, 2)
    assert seen["sections"] == kernel.config.DEFAULT_SEGMENTS


@pytest.mark.parametrize("segments", [8, 16])
def test_explicit_segments_used(monkeypatch, segments):
    seen = {}

    def fake_cylinder(radius, height, sections):
        seen["sections"] = sections
        return trimesh.creation.box(extents=[1, 1, 1])

    monkeypatch.setattr(kernel.trimesh.creation, "cylinder", fake_cylinder)
    kernel.make_cylinder(10, 2, segments=segments)
    assert seen["sections"] == segments
