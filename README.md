# lajolla

Building blocks of a physically based renderer, written in Python on top of
NumPy. Vectors are NumPy arrays of three doubles, and spectra are plain RGB
triples.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `lajolla.mathutil`: the constants `PI`, `INV_PI`, `TWO_PI` and friends,
  `radians`, `degrees`, a `modulo` that never returns a negative result,
  `to_lowercase`, vector helpers (`vec3`, `dot`, `length`, `normalize`,
  `distance`, `distance_squared`) and the `RenderError` exception.
- `lajolla.frame`: orthonormal frames. `coordinate_system(n)` completes a unit
  vector to a basis; `Frame` holds the axes `x`, `y`, `n` and can be negated
  and indexed; `frame_from_normal`, `to_local` and `to_world` convert between
  frames.
- `lajolla.spectrum`: RGB spectra (`make_zero_spectrum`,
  `make_const_spectrum`, `from_rgb`, `to_rgb`, `spectrum_sqrt`,
  `spectrum_exp`), `luminance`, analytic fits of the CIE 1931 matching
  functions (`x_fit_1931`, `y_fit_1931`, `z_fit_1931`), `integrate_xyz` for
  sorted `(wavelength, value)` pairs over 400–700 nm, `xyz_to_rgb` and
  `srgb_to_rgb`.
- `lajolla.table_dist`: `make_table_dist_1d` builds a `TableDist1D` with
  `sample(u)` and `prob(index)`; its entries must be positive, otherwise
  `ValueError` is raised. `make_table_dist_2d(f, width, height)` builds a
  piecewise-constant `TableDist2D` over the unit square with `sample(uv)` and
  `pdf(xy)`.
- `lajolla.transform`: 4x4 matrices from `translate`, `scale`, `rotate`
  (angle in degrees), `look_at` and `perspective` (field of view in degrees),
  and `xform_point`, `xform_vector`, `xform_normal` (the last takes the
  inverse transform).
- `lajolla.microfacet`: `schlick_fresnel`, `fresnel_dielectric`,
  `fresnel_dielectric_full`, the `gtr2`/`ggx` distribution,
  `smith_masking_gtr2` and `sample_visible_normals`.
- `lajolla.volume`: `Ray`, `ConstantVolume` and the trilinearly interpolated
  `GridVolume`, each with `lookup`, `max_value`, `set_scale` and `intersect`.
  `load_volume(filename, target_channel)` reads a binary `VOL` file (version
  3, little-endian float32, 1 or 3 channels) into a 1- or 3-channel
  `GridVolume`, raising `RenderError` for a bad header, an unsupported format
  or a truncated file.
- `lajolla.media`: `HomogeneousMedium` (constant `sigma_a`, `sigma_s`) and
  `HeterogeneousMedium` (volumes for `density` and `albedo`), with
  `get_majorant`, `get_sigma_s` and `get_sigma_a`.
- `lajolla.filters`: `Box`, `Tent` and `Gaussian` pixel filters, each with
  `sample(uv)` mapping two uniform numbers to a filter offset.
- `lajolla.materials`: `Lambertian`, `RoughPlastic` and `RoughDielectric`,
  each with `eval`, `pdf_sample_bsdf` and `sample_bsdf` (which returns a
  `BSDFSampleRecord` or `None`). Reflectances and roughness are constants
  (scalar or RGB) or callables of `(uv, footprint)`. A hit point is described
  by a `SurfacePoint` or anything with the same fields. Also
  `TransportDirection` and `sample_cos_hemisphere`.
- `lajolla.shape`: `Sphere` and `TriangleMesh`, sharing the ids of
  `ShapeBase` (`material_id`, `area_light_id`, medium ids; `-1` means none)
  and its `is_light()`; plus the `ShadingInfo` record.
- `lajolla.lights`: `PointAndNormal`, `DiffuseAreaLight` and `Envmap`, each
  with `power`, `sample_point_on_light`, `pdf_point_on_light`, `emission` and
  `init_sampling_dist`. An `Envmap`'s values are an RGB image of shape
  `(height, width, 3)`, a constant, or a callable of `(uv, footprint)`; images
  are importance sampled per pixel.
- `lajolla.scene`: `Integrator`, `RenderOptions`, `BSphere` and `Scene`. On
  creation a `Scene` initialises every light's sampling table and weights the
  lights by power; it offers `sample_light`, `light_pmf`, `has_envmap`,
  `get_envmap`, `shadow_epsilon` and `intersection_epsilon`.
- `lajolla.path_tracing`: `path_tracing(scene, x, y, rng)` returns one
  radiance estimate for a pixel using next event estimation, multiple
  importance sampling and Russian roulette. Rays are intersected directly
  against the scene's spheres and triangle meshes. `rng` is any object with a
  `random()` method, such as `random.Random`.

## Example

```python
from lajolla.table_dist import make_table_dist_1d
from lajolla.transform import rotate, xform_vector
from lajolla.mathutil import vec3

dist = make_table_dist_1d([1.0, 3.0])
print(dist.sample(0.5), dist.prob(1))   # 1 0.75

m = rotate(90.0, vec3(0, 0, 1))
print(xform_vector(m, vec3(1, 0, 0)))   # approximately [0, 1, 0]
```

## What the package does not do

This is a library of parts, not a finished renderer:

- There is no command-line program, no scene-file parser and no image
  output; the caller loops over pixels and stores the results.
- There is no camera. `path_tracing` expects `scene.camera` to provide
  `width`, `height` and `sample_primary(screen_pos)` returning a `Ray`.
- `Sphere` and `TriangleMesh` do not implement surface area or point
  sampling. A `DiffuseAreaLight` needs its shape to provide `surface_area()`,
  `sample_point_on_shape(ref_point, uv, w)` and
  `pdf_point_on_shape(point, ref_point)`.
- There are no texture files or mipmaps; textures are constants, callables
  or, for environment maps, in-memory arrays.
- Intersection is a brute-force loop over all primitives, with no
  acceleration structure, so it is slow for large meshes.