[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lajolla"
version = "0.1.0"
description = "Building blocks of a physically based path tracer: sampling tables, microfacet materials, lights, volumes, transforms and a path-tracing estimator."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "rendering",
    "path tracing",
    "monte carlo",
    "microfacet",
    "bsdf",
    "graphics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lajolla"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
