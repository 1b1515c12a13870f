#!/usr/bin/env python
# coding=utf-8
from typing import List, Optional, Tuple

import pythontk as ptk

from harmonytk.node_utils.scene_graph import NodePort, SceneGraphService
from harmonytk.node_utils._node_utils import NodeUtils
from harmonytk.anim_utils._anim_utils import AnimUtils
from harmonytk.anim_utils.anim_structs import SwitchBranch


class TransformationSwitch(ptk.LoggingMixin):
    """
    Transformation Switch
    Routes a set of static nodes through one Transformation Switch that picks a
    branch from the cel exposed on the timing drawing.
    """

    NODE_TYPE = "TransformationSwitch"
    NODE_NAME = "Transformation-Switch"
    SWITCH_OFFSET = 100
    CEL_VARIANT_COUNT = 100
    BRANCH_ATTR = "transformationnames.transformation{}"

    def __init__(self, scene: SceneGraphService):
        super().__init__()
        self.scene = scene

    @classmethod
    def get_cel_expression(cls, cel: str, variants: Optional[int] = None) -> str:
        """Return the switch names matching a cel and its numbered duplicates.

        Example:
            get_cel_expression("003") # returns: "003;003+1;003+2;...;003+100;"
        """
        count = cls.CEL_VARIANT_COUNT if variants is None else variants
        names = [cel] + [f"{cel}+{i}" for i in range(1, count + 1)]
        return "".join(f"{name};" for name in names)

    def create_switch(
        self,
        group: str,
        statics: List[str],
        cels: List[str],
        drawing: str,
        src: Optional[NodePort] = None,
        dst: Optional[NodePort] = None,
    ) -> Tuple[str, List[SwitchBranch]]:
        """Create a Transformation Switch selecting between the given static nodes.

        Parameters:
            group (str): The group to create the switch in.
            statics (list): Static node paths, one per cel, in pairing order.
            cels (list): The cel paired with each static node.
            drawing (str): The timing drawing. The switch reads the same timing column.
            src (NodePort): The node/port that fed the peg. Linked into switch port 0.
            dst (NodePort): The peg's former consumer. Relinked to the switch output.

        Returns:
            (tuple) The switch node path and its branches.

        Raises:
            ValueError: If no static nodes are given, or statics and cels differ in length.
        """
        if not statics:
            raise ValueError("At least one static node is required.")
        if len(statics) != len(cels):
            raise ValueError(
                f"Got {len(statics)} static nodes for {len(cels)} cels."
            )

        coord = NodeUtils.get_average_coord(self.scene, statics[0], statics[-1])
        name = NodeUtils.unique_name_in_group(self.scene, self.NODE_NAME, group)
        switch = self.scene.add_node(
            group, name, self.NODE_TYPE, coord.x, coord.y + self.SWITCH_OFFSET
        )

        use_element, column = AnimUtils.get_drawing_column(self.scene, drawing)
        self.scene.set_text_attr(
            switch, AnimUtils.ELEMENT_MODE_ATTR, "On" if use_element else "Off", 1
        )
        if column:
            self.scene.link_attr(switch, AnimUtils.timing_attr(use_element), column)
        else:
            self.logger.warning(f"{drawing} has no timing column to link to {switch}.")

        branches = []
        for index, (static, cel) in enumerate(zip(statics, cels), start=1):
            self.scene.link(static, 0, switch, index)
            expression = self.get_cel_expression(cel)
            self.scene.set_text_attr(
                switch, self.BRANCH_ATTR.format(index), expression, 1
            )
            branches.append(SwitchBranch(index, static, cel, expression))
            self.logger.debug(f"{switch}[{index}] <- {static} ({cel})")

        if src is not None:
            self.scene.link(src.node, src.port, switch, 0)

        if dst is not None:
            self.scene.unlink(dst.node, dst.port)
            self.scene.link(switch, 0, dst.node, dst.port)
        else:
            self.logger.warning(f"No downstream node to connect {switch} to.")

        return switch, branches
