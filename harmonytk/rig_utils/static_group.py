#!/usr/bin/env python
# coding=utf-8
from typing import List, Optional

import pythontk as ptk

from harmonytk.node_utils.scene_graph import Coordinate, SceneGraphService
from harmonytk.node_utils._node_utils import NodeUtils
from harmonytk.anim_utils._anim_utils import AnimUtils


class StaticGroup(ptk.LoggingMixin):
    """
    Static Group
    Wraps generated static rig nodes in a group, adds a disabled clone of the
    timing drawing for reference, and retires the source peg as a backup.
    """

    GROUP_PREFIX = "StaticGroup-"
    GROUP_OFFSET = (-25, 25)
    CLONE_SUFFIX = "-CLONE"
    CLONE_COORD = Coordinate(50, 150)
    BACKUP_SUFFIX = "-backup"
    # Nodes the host adds to a new group that the clone drawing replaces.
    AUTO_COMPOSITE = "Composite"
    AUTO_PORT_OUT = "Multi-Port-Out"

    def __init__(self, scene: SceneGraphService):
        super().__init__()
        self.scene = scene

    def get_group_name(self, peg: str, parent: str) -> str:
        """Return a free ``StaticGroup-<peg name>`` name in the parent group.

        Example:
            get_group_name("Top/Arm-p", "Top") # returns: "StaticGroup-Arm"
        """
        peg_name = NodeUtils.strip_peg_marker(self.scene.node_name(peg))
        return NodeUtils.unique_name_in_group(
            self.scene, f"{self.GROUP_PREFIX}{peg_name}", parent
        )

    def wrap_in_group(
        self,
        peg: str,
        parent: str,
        nodes: List[str],
        coord: Optional[Coordinate] = None,
    ) -> str:
        """Group the given nodes under a name derived from the peg.

        Parameters:
            peg (str): The source peg, used for the group name.
            parent (str): The group holding the nodes.
            nodes (list): The generated nodes to wrap.
            coord (Coordinate): The peg's position. The group is placed just below-left of it.

        Returns:
            (str) The new group path.
        """
        coord = coord or self.scene.coord(peg)
        name = self.get_group_name(peg, parent)
        group = self.scene.create_group(nodes, name)
        self.scene.set_coord(
            group, coord.x + self.GROUP_OFFSET[0], coord.y + self.GROUP_OFFSET[1]
        )
        self.logger.debug(f"Wrapped {len(nodes)} nodes in {group}")
        return group

    def create_clone_drawing(self, drawing: str, switch: str, group: str) -> str:
        """Create a disabled clone of the timing drawing inside the group.

        The clone reads the same timing column as the drawing and is parented to the
        switch, so opening the group shows which cel drives each branch. The host's
        default composite and second group output are removed in its favour.

        Parameters:
            drawing (str): The timing drawing to clone.
            switch (str): The Transformation Switch inside the group.
            group (str): The static group.

        Returns:
            (str) The clone node path.
        """
        name = NodeUtils.unique_name_in_group(
            self.scene, self.scene.node_name(drawing) + self.CLONE_SUFFIX, group
        )
        clone = self.scene.add_node(
            group, name, "READ", self.CLONE_COORD.x, self.CLONE_COORD.y
        )

        use_element, column = AnimUtils.get_drawing_column(self.scene, drawing)
        self.scene.set_text_attr(
            clone, AnimUtils.ELEMENT_MODE_ATTR, "On" if use_element else "Off", 1
        )
        if column:
            self.scene.link_attr(clone, AnimUtils.timing_attr(use_element), column)

        if not self.scene.get_bool_attr(drawing, "canAnimate", 1):
            self.scene.set_animatable(clone, False)
        self.scene.set_enabled(clone, False)
        self.scene.link(switch, 0, clone, 0)

        port_out = f"{group}/{self.AUTO_PORT_OUT}"
        if self.scene.node_exists(port_out):
            self.scene.unlink(port_out, 1)
        composite = f"{group}/{self.AUTO_COMPOSITE}"
        if self.scene.node_exists(composite):
            self.scene.delete_node(composite)

        self.logger.debug(f"Created clone drawing {clone}")
        return clone

    def retire_peg(self, peg: str) -> str:
        """Unlink the peg entirely and rename it with the backup suffix.

        Returns:
            (str) The renamed peg path.
        """
        self.scene.unlink(peg, 0)
        dropped = NodeUtils.unlink_outputs(self.scene, peg)
        if dropped:
            self.logger.warning(
                f"{peg} still fed {', '.join(dropped)}. Unlinked, relink manually."
            )
        name = NodeUtils.unique_name_in_group(
            self.scene,
            self.scene.node_name(peg) + self.BACKUP_SUFFIX,
            self.scene.parent_group(peg),
        )
        backup = self.scene.rename(peg, name)
        self.logger.debug(f"Retired {peg} as {backup}")
        return backup
