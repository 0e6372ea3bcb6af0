"""Geometric shapes and the bookkeeping ids that tie them to materials, lights and media."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .frame import Frame
from .table_dist import TableDist1D


@dataclass
class ShadingInfo:
    """Shading quantities at a surface point that the intersector does not supply."""

    uv: np.ndarray
    shading_frame: Frame
    mean_curvature: float
    inv_uv_size: float


@dataclass(kw_only=True)
class ShapeBase:
    """Ids shared by every shape; -1 means "none".

    area_light_id points to a light when the shape itself emits light.
    """

    material_id: int = -1
    area_light_id: int = -1
    interior_medium_id: int = -1
    exterior_medium_id: int = -1

    def is_light(self):
        """Whether the shape is an area light."""
        return self.area_light_id >= 0


@dataclass(kw_only=True)
class Sphere(ShapeBase):
    """A sphere given by its centre and radius."""

    position: np.ndarray
    radius: float


@dataclass(kw_only=True)
class TriangleMesh(ShapeBase):
    """An indexed triangle mesh with optional per-vertex normals and uvs.

    total_area and triangle_sampler are only used when the mesh is an area light.
    """

    positions: list = field(default_factory=list)
    indices: list = field(default_factory=list)
    normals: list = field(default_factory=list)
    uvs: list = field(default_factory=list)
    total_area: float = 0.0
    triangle_sampler: Optional[TableDist1D] = None