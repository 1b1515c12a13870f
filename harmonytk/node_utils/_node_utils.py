# !/usr/bin/python
# coding=utf-8
from typing import Dict, Iterable, List, Optional

import pythontk as ptk

# from this package:
from harmonytk.node_utils.scene_graph import Coordinate, SceneGraphService


class NodeUtils(ptk.HelpMixin):
    """ """

    STATIC_PREFIX = "Static"

    @staticmethod
    def get_unique_name(name: str, existing: Iterable[str]) -> str:
        """Return the given name, or the first free ``<name>_<n>`` variant.

        Parameters:
            name (str): The desired name.
            existing (iterable): The names already used in the destination group.

        Returns:
            (str) A name not present in 'existing'.

        Example:
            get_unique_name("Transformation-Switch", ["Transformation-Switch"])
            # returns: "Transformation-Switch_1"
        """
        taken = set(existing)
        candidate, suffix = name, 0
        while candidate in taken:
            suffix += 1
            candidate = f"{name}_{suffix}"
        return candidate

    @classmethod
    def get_unique_static_name(cls, existing: Iterable[str]) -> str:
        """Return ``Static<n>`` for the smallest positive n not used in 'existing'.

        Parameters:
            existing (iterable): The names already used in the destination group.

        Returns:
            (str) The static node name, e.g. "Static3".
        """
        taken = set(existing)
        suffix = 1
        while f"{cls.STATIC_PREFIX}{suffix}" in taken:
            suffix += 1
        return f"{cls.STATIC_PREFIX}{suffix}"

    @classmethod
    def unique_name_in_group(
        cls, scene: SceneGraphService, name: str, group: str
    ) -> str:
        """Scene-facing wrapper of :meth:`get_unique_name` for one group."""
        return cls.get_unique_name(name, scene.child_names(group))

    @classmethod
    def unique_static_name_in_group(cls, scene: SceneGraphService, group: str) -> str:
        """Scene-facing wrapper of :meth:`get_unique_static_name` for one group."""
        return cls.get_unique_static_name(scene.child_names(group))

    @staticmethod
    def get_nodes_by_type(
        scene: SceneGraphService, nodes: Iterable[str], node_types: Iterable[str]
    ) -> Dict[str, List[str]]:
        """Sort the given nodes into lists keyed by host node type.

        Parameters:
            scene (SceneGraphService): The scene to query.
            nodes (str/list): The node(s) to sort.
            node_types (list): The node types to collect. Other types are ignored.

        Returns:
            (dict) ``{node_type: [node, ..]}`` with a (possibly empty) list for each requested type.
        """
        result = {node_type: [] for node_type in node_types}
        for node in ptk.make_iterable(nodes):
            node_type = scene.node_type(node)
            if node_type in result:
                result[node_type].append(node)
        return result

    @staticmethod
    def get_average_coord(
        scene: SceneGraphService, node0: str, node1: str
    ) -> Coordinate:
        """Return the midpoint between two nodes in the node view."""
        return Coordinate.average(scene.coord(node0), scene.coord(node1))

    @staticmethod
    def unlink_outputs(
        scene: SceneGraphService, node: str, port: int = 0
    ) -> List[str]:
        """Unlink every consumer of the given output port.

        Returns:
            (list) The consumer nodes that were unlinked.
        """
        unlinked = []
        while True:
            dst = scene.dst_node_info(node, port)
            if dst is None:
                return unlinked
            scene.unlink(dst.node, dst.port)
            unlinked.append(dst.node)

    @staticmethod
    def strip_peg_marker(name: str, markers: Optional[List[str]] = None) -> str:
        """Remove the first peg naming marker (``-p``, else ``-P``) from a node name.

        Example:
            strip_peg_marker("Arm-p") # returns: "Arm"
        """
        for marker in markers or ["-p", "-P"]:
            if marker in name:
                return name.replace(marker, "", 1)
        return name
