# !/usr/bin/python
# coding=utf-8
from pythontk.core_utils.module_resolver import bootstrap_package


__package__ = "harmonytk"
__version__ = "0.1.0"

"""Dynamic Attribute Resolver for Module-based Packages

``bootstrap_package`` wires a :class:`ModuleAttributeResolver` into this package so classes,
methods, and helper APIs remain available while keeping this module lean.
"""

DEFAULT_INCLUDE = {
    # Core utils
    "core_utils._core_utils": "CoreUtils",
    # Node utils
    "node_utils._node_utils": "NodeUtils",
    "node_utils.scene_graph": ["SceneGraphService", "Coordinate", "NodePort"],
    "node_utils.memory_scene": "MemoryScene",
    # Animation utilities
    "anim_utils._anim_utils": "AnimUtils",
    "anim_utils.anim_structs": "*",
    # Rig utils
    "rig_utils.static_nodes": "StaticNodes",
    "rig_utils.transformation_switch": "TransformationSwitch",
    "rig_utils.static_group": "StaticGroup",
    "rig_utils.peg_to_static": "*",
}

bootstrap_package(
    globals(),
    include=DEFAULT_INCLUDE,
)
