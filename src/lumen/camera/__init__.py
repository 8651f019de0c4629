"""Camera module for view and ray generation.

Components:
    thin_lens: Thin-lens camera with depth of field and its per-pass Viewport

Camera responsibilities:
    - Resolve the orientation (look-at, rotation matrix or Euler angles)
    - Build the image plane for an output size
    - Sample the lens disk and emit primary rays

Ray generation uses normalized image coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image
"""

from .thin_lens import Camera, CameraDirection, LookAt, RollPitchYaw, Rotation, Viewport

__all__ = [
    "Camera",
    "CameraDirection",
    "LookAt",
    "Rotation",
    "RollPitchYaw",
    "Viewport",
]
