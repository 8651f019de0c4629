"""Progressive CPU path tracer.

This package renders scenes of spheres with a recursive Monte Carlo path
tracer, following the "Ray Tracing in One Weekend" model:
- Thin-lens camera with depth of field
- Lambertian, metal and dielectric materials
- Fixed multisample patterns for anti-aliasing
- Row-chunked parallel rendering into a shared, lock-guarded frame buffer

Subpackages:
    core: Rays, colors, sample patterns, integrator, frame buffer and scheduler
    geometry: Shape primitives and intersection algorithms
    materials: Scattering models
    scene: Scene containers, shared scene state and demo scenes
    camera: Thin-lens camera and viewport projection
    preview: PNG export, Matplotlib display and the Taichi GGUI viewer
"""

__version__ = "0.1.0"
