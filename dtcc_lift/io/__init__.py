from .vertex_index import VertexIndex
from .payload import triangle_groups, solid_triangles, floor_triangle_points
from .obj import to_obj, save_obj
from .cityjson import to_cityjson, save_cityjson
from .citygml import to_citygml, save_citygml
from .tabular import buildings_to_df, save_csv
from .vector import load_features, save_features, get_vector_driver
from .pointcloud import load_pointcloud, save_pointcloud
from .city import save, list_io

__all__ = [
    "VertexIndex",
    "triangle_groups",
    "solid_triangles",
    "floor_triangle_points",
    "to_obj",
    "save_obj",
    "to_cityjson",
    "save_cityjson",
    "to_citygml",
    "save_citygml",
    "buildings_to_df",
    "save_csv",
    "load_features",
    "save_features",
    "get_vector_driver",
    "load_pointcloud",
    "save_pointcloud",
    "save",
    "list_io",
]
