"""The scene: camera, content, render options and light selection."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .mathutil import distance
from .table_dist import TableDist1D, make_table_dist_1d


class Integrator(enum.Enum):
    """The rendering algorithm or debug visualisation to run."""

    DEPTH = "depth"
    SHADING_NORMAL = "shading_normal"
    MEAN_CURVATURE = "mean_curvature"
    RAY_DIFFERENTIAL = "ray_differential"
    MIPMAP_LEVEL = "mipmap_level"
    PATH = "path"
    VOL_PATH = "vol_path"


@dataclass
class RenderOptions:
    """Settings of a render; max_depth -1 leaves termination to Russian roulette."""

    integrator: Integrator = Integrator.PATH
    samples_per_pixel: int = 4
    max_depth: int = -1
    rr_depth: int = 5
    vol_path_version: int = 0
    max_null_collisions: int = 1000


@dataclass
class BSphere:
    """A bounding sphere."""

    radius: float
    center: np.ndarray

    @classmethod
    def from_box(cls, lower, upper):
        """The sphere through the corners of an axis-aligned box."""
        lower = np.asarray(lower, dtype=np.float64)
        upper = np.asarray(upper, dtype=np.float64)
        return cls(distance(upper, lower) / 2, (lower + upper) / 2.0)


@dataclass
class Scene:
    """Everything needed to render: content, options and a light-selection table.

    envmap_light_id is -1 when the scene has no environment map. On creation
    every light builds its sampling tables, then lights are weighted by power.
    """

    camera: Any = None
    materials: list = field(default_factory=list)
    shapes: list = field(default_factory=list)
    lights: list = field(default_factory=list)
    media: list = field(default_factory=list)
    envmap_light_id: int = -1
    texture_pool: Any = None
    options: RenderOptions = field(default_factory=RenderOptions)
    output_filename: str = ""
    bounds: BSphere = field(default_factory=lambda: BSphere(0.0, np.zeros(3)))
    light_dist: TableDist1D = field(init=False)

    def __post_init__(self):
        for light in self.lights:
            light.init_sampling_dist(self)
        self.light_dist = make_table_dist_1d([light.power(self) for light in self.lights])

    def sample_light(self, u):
        """Pick a light index given a uniform number in [0, 1]."""
        return self.light_dist.sample(u)

    def light_pmf(self, light_id):
        """Probability of sample_light picking light_id."""
        return self.light_dist.prob(light_id)

    def has_envmap(self):
        """Whether the scene has an environment map."""
        return self.envmap_light_id != -1

    def get_envmap(self):
        """The environment map light."""
        if not self.has_envmap():
            raise ValueError("scene has no environment map")
        return self.lights[self.envmap_light_id]

    def shadow_epsilon(self):
        """Offset keeping shadow rays off the surface they start on."""
        return min(self.bounds.radius * 1e-5, 0.01)

    def intersection_epsilon(self):
        """Offset keeping continuation rays off the surface they start on."""
        return min(self.bounds.radius * 1e-5, 0.01)