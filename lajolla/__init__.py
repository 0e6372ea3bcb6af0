"""Building blocks of a physically based path tracer: sampling tables, transforms, microfacet materials, volumes, lights, scenes and a path-tracing estimator."""

__version__ = "0.1.0"