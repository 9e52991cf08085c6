import pytest

from dtcc_lift.io import VertexIndex, save_obj, to_obj


def test_vertex_index():
    index = VertexIndex(start=1)
    assert index.add(0.0, 0.0, 500) == 1
    assert index.add(0.0001, 0.0, 500) == 1
    assert index.add(0.0, 0.0, 0) == 2
    assert index.vertices[0] == (0.0, 0.0, 5.0)
    assert index.triangle([(0, 0, 500), (0, 0, 500), (1, 0, 500)]) is None
    assert index.add_ring([(0, 0, 0), (0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 0, 0)]) == [2, 4, 5]


def test_obj_lod1(lifted_block):
    text = to_obj([lifted_block])
    lines = text.splitlines()
    vertices = [l for l in lines if l.startswith("v ")]
    faces = [l for l in lines if l.startswith("f ")]
    assert len(vertices) == 8
    assert len(faces) == 12
    assert "usemtl Building" in lines
    assert "usemtl BuildingFloor" in lines
    assert "v 0.000 0.000 5.00" in lines
    for face in faces:
        indices = [int(i) for i in face.split()[1:]]
        assert len(set(indices)) == 3
        assert min(indices) >= 1


def test_obj_lod0(make_building):
    building = make_building(roof=5.0, base=1.0)
    lines = to_obj([building], lod=0).splitlines()
    vertices = [l for l in lines if l.startswith("v ")]
    assert len(vertices) == 4
    assert all(v.endswith(" 1.00") for v in vertices)
    assert len([l for l in lines if l.startswith("f ")]) == 2


def test_obj_invalid_lod(lifted_block):
    with pytest.raises(ValueError):
        to_obj([lifted_block], lod=2)


def test_save_obj(lifted_block, tmp_path):
    path = tmp_path / "city.obj"
    save_obj([lifted_block], path)
    assert path.read_text() == to_obj([lifted_block])
