"""Scene module for geometry containers, scene state and demo scenes.

Components:
    intersection: ObjectList container and the scene-wide ray query
    manager: Lock-guarded camera/world/controls state with immutable snapshots
    random_scene: The random final scene and a small demo scene

The scene is a tree of SceneObjects (spheres and nested object lists). It is
built once and treated as read-only while a frame renders.
"""

# intersection must be imported before the modules that build scenes
from .intersection import T_MAX, T_MIN, ObjectList, intersect_scene, iter_spheres
from .manager import CONTROL_NAMES, Controls, SceneManager, SceneSnapshot
from .random_scene import (
    RandomSceneParams,
    create_random_scene,
    create_simple_scene,
    default_camera,
    simple_camera,
)

__all__ = [
    # Intersection
    "T_MIN",
    "T_MAX",
    "ObjectList",
    "intersect_scene",
    "iter_spheres",
    # Manager
    "CONTROL_NAMES",
    "Controls",
    "SceneManager",
    "SceneSnapshot",
    # Demo scenes
    "RandomSceneParams",
    "create_random_scene",
    "create_simple_scene",
    "default_camera",
    "simple_camera",
]
