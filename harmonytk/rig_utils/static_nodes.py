#!/usr/bin/env python
# coding=utf-8
from typing import Optional

import pythontk as ptk

from harmonytk.node_utils.scene_graph import Coordinate, NodePort, SceneGraphService
from harmonytk.node_utils._node_utils import NodeUtils
from harmonytk.anim_utils.anim_structs import ChannelConfig


class StaticNodes(ptk.LoggingMixin):
    """
    Static Nodes
    Freezes a peg's pose at one frame into a non-animatable Static Transformation node.
    """

    NODE_TYPE = "StaticConstraint"
    STATIC_START = Coordinate(100, 0)
    STATIC_OFFSET = (-75, 25)

    def __init__(self, scene: SceneGraphService):
        super().__init__()
        self.scene = scene

    def create_static(
        self,
        peg: str,
        group: str,
        config: ChannelConfig,
        time: int,
        src: Optional[NodePort] = None,
        coord: Optional[Coordinate] = None,
    ) -> str:
        """Create a static node holding the peg's channel values at the given frame.

        Parameters:
            peg (str): The animated peg to sample.
            group (str): The group to create the node in.
            config (ChannelConfig): The peg's channel layout, mirrored on the static node.
            time (int): The frame to sample.
            src (NodePort): The node/port feeding the peg. Linked into the static node's input.
            coord (Coordinate): The previous static node's position. The new node is
                placed down and to the left of it. Defaults to STATIC_START.

        Returns:
            (str) The new static node path.
        """
        coord = coord or self.STATIC_START
        name = NodeUtils.unique_static_name_in_group(self.scene, group)
        static = self.scene.add_node(
            group,
            name,
            self.NODE_TYPE,
            coord.x + self.STATIC_OFFSET[0],
            coord.y + self.STATIC_OFFSET[1],
        )
        self.scene.set_text_attr(static, "active", "TRUE", 0)
        self.scene.set_animatable(static, False)

        self.copy_position(peg, static, config, time)
        self.copy_scale(peg, static, config, time)
        self.copy_rotation(peg, static, config, time)
        self._copy(peg, "skew", static, "skewx", time)

        if src is not None:
            self.scene.link(src.node, src.port, static, 0)
        else:
            self.logger.warning(f"{peg} has no input. {static} left unlinked.")

        self.logger.debug(f"Created {static} from {peg} at frame {time}")
        return static

    def copy_position(
        self, peg: str, static: str, config: ChannelConfig, time: int
    ) -> None:
        prefix = "position" if config.position_separate else "position.3dpath"
        for axis in "xyz":
            self._copy(peg, f"{prefix}.{axis}", static, f"translate.{axis}", time)

    def copy_scale(
        self, peg: str, static: str, config: ChannelConfig, time: int
    ) -> None:
        if not config.scale_separate:
            self.scene.set_text_attr(static, "scale.separate", "FALSE", 0)
            self._copy(peg, "scale.xy", static, "scale.xy", time)
            return

        self.scene.set_text_attr(static, "scale.separate", "TRUE", 0)
        for attr in config.scale_attrs:
            self._copy(peg, attr, static, attr, time)

    def copy_rotation(
        self, peg: str, static: str, config: ChannelConfig, time: int
    ) -> None:
        if not config.is_3d:
            self._copy(peg, "rotation.anglez", static, "rotate.anglez", time)
            return

        if config.rotation_separate:
            values = [
                self.scene.get_text_attr(peg, f"rotation.angle{axis}", time)
                for axis in "xyz"
            ]
        else:
            column = self.scene.linked_column(peg, "rotation.quaternionpath")
            if column:
                values = [self.scene.column_entry(column, i, time) for i in (1, 2, 3)]
            else:
                values = [
                    self.scene.get_text_attr(peg, f"rotation.angle{axis}", time)
                    for axis in "xyz"
                ]
        for axis, value in zip("xyz", values):
            self.scene.set_text_attr(static, f"rotate.angle{axis}", value, 0)

    def _copy(self, peg: str, attr: str, static: str, static_attr: str, time: int):
        value = self.scene.get_text_attr(peg, attr, time)
        self.scene.set_text_attr(static, static_attr, value, 0)
