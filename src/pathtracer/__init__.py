"""CPU path tracer with chunk-based parallel rendering.

This package renders scenes of spheres, planes, and triangle meshes by
unidirectional Monte Carlo path tracing, with support for:
- Lambertian, mirror/glossy, and dielectric (Fresnel) surfaces
- Emissive surfaces as the only light sources
- Jittered anti-aliasing and a hard bounce budget
- Parallel rendering over image chunks with reproducible per-chunk sampling

Subpackages:
    core: Vector utilities, path integrator, scheduler, and progress
    geometry: Shape primitives and intersection algorithms
    materials: Material record and bounce sampling
    scene: Nearest-hit queries, scene descriptions, and built-in scenes
    camera: Pinhole camera with ray generation
    preview: Image export utilities
"""

__version__ = "0.1.0"
