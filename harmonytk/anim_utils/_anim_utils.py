# !/usr/bin/python
# coding=utf-8
import os
from typing import Iterable, List, Optional, Tuple

import pythontk as ptk

# from this package:
from harmonytk.node_utils.scene_graph import SceneGraphService
from harmonytk.anim_utils.anim_structs import ChannelConfig, KeyframeCelPair


class AnimUtils(ptk.HelpMixin):
    """Animation utilities for Harmony.

    For help on this class use: AnimUtils.help()

    Keyframes are read from the columns linked to a peg's channel attributes,
    never from the attributes themselves; a channel with no linked column is
    not animated and holds no keyframes.

    Cels are identified by the frame part of the exposed drawing's file name
    (see :meth:`get_cel_name`), so the same drawing exposed on several frames,
    or under a numbered duplicate such as ``001+2``, is one cel.
    """

    SETTING_ATTRS = {
        "is_3d": "enable3d",
        "position_separate": "position.separate",
        "scale_separate": "scale.separate",
        "rotation_separate": "rotation.separate",
    }
    ELEMENT_MODE_ATTR = "drawing.ELEMENT_MODE"
    ELEMENT_ATTR = "drawing.element"
    TIMING_ATTR = "drawing.customName.timing"

    @classmethod
    def get_channel_config(cls, scene: SceneGraphService, peg: str) -> ChannelConfig:
        """Read the 3D and separate-channel flags of a peg.

        Parameters:
            scene (SceneGraphService): The scene to query.
            peg (str): The peg node path.

        Returns:
            (ChannelConfig) Flags that can't be resolved read as False.
        """
        return ChannelConfig(
            **{
                field: scene.get_bool_attr(peg, attr, 1)
                for field, attr in cls.SETTING_ATTRS.items()
            }
        )

    @staticmethod
    def get_channel_columns(
        scene: SceneGraphService, peg: str, config: ChannelConfig
    ) -> List[str]:
        """Return the columns animating the peg's configured channels.

        Channels without a linked column are skipped.
        """
        columns = []
        for attr in config.channel_attrs:
            column = scene.linked_column(peg, attr)
            if column:
                columns.append(column)
        return columns

    @staticmethod
    def optimize_list(items: Iterable[int]) -> List[int]:
        """Remove duplicate items and sort the rest in ascending numeric order.

        Example:
            optimize_list([5, 1, 3, 1, 5]) # returns: [1, 3, 5]
        """
        return sorted(set(items))

    @classmethod
    def collect_keyframe_times(
        cls, scene: SceneGraphService, peg: str, config: ChannelConfig
    ) -> List[int]:
        """Return every frame holding a keyframe on any of the peg's channels.

        Parameters:
            scene (SceneGraphService): The scene to query.
            peg (str): The peg node path.
            config (ChannelConfig): The peg's channel layout.

        Returns:
            (list) Distinct frames in ascending order. Empty when the peg is not animated.
        """
        times = []
        for column in cls.get_channel_columns(scene, peg, config):
            times.extend(int(t) for t in scene.keyframe_times(column))
        return cls.optimize_list(times)

    @classmethod
    def get_cel_name(cls, file_name: Optional[str]) -> str:
        """Return the cel identity of an exposed drawing file name.

        The identity is the segment after the last '-' of the base name, without
        the file extension and without any '+<n>' duplicate suffix.

        Example:
            get_cel_name("char-walk-001+2.tvg") # returns: "001"
            get_cel_name("char-idle-007.tvg") # returns: "007"
        """
        if not file_name:
            return ""
        base_name = os.path.basename(file_name.replace("\\", "/"))
        base_name = os.path.splitext(base_name)[0]
        return base_name.split("-")[-1].split("+")[0]

    @classmethod
    def get_drawing_column(
        cls, scene: SceneGraphService, drawing: str
    ) -> Tuple[bool, Optional[str]]:
        """Return the drawing's element-mode flag and the column holding its timing.

        Returns:
            (tuple) ``(use_element, column)``. The column is read from 'drawing.element'
                when element mode is on, else from 'drawing.customName.timing'.
        """
        use_element = scene.get_bool_attr(drawing, cls.ELEMENT_MODE_ATTR, 1)
        column = scene.linked_column(drawing, cls.timing_attr(use_element))
        return use_element, column

    @classmethod
    def timing_attr(cls, use_element: bool) -> str:
        return cls.ELEMENT_ATTR if use_element else cls.TIMING_ATTR

    @classmethod
    def pair_keys_to_cels(
        cls,
        scene: SceneGraphService,
        times: Iterable[int],
        drawing_column: Optional[str],
    ) -> List[KeyframeCelPair]:
        """Pair each keyframe time with the cel exposed at that frame.

        A time is skipped when no cel is exposed on it, or when its cel was already
        paired with an earlier time. Each cel is therefore used at most once, by the
        lowest frame it appears on.

        Parameters:
            scene (SceneGraphService): The scene to query.
            times (list): Keyframe times in ascending order.
            drawing_column (str): The timing column of the reference drawing.

        Returns:
            (list) KeyframeCelPair objects ordered by time.

        Example:
            # keys on 1, 2, 5, 6, 8 with CEL1 on 1-4, CEL2 on 5-7, CEL1 on 8:
            pair_keys_to_cels(scene, [1, 2, 5, 6, 8], column)
            # returns: [KeyframeCelPair(1, "CEL1"), KeyframeCelPair(5, "CEL2")]
        """
        if not drawing_column:
            return []

        pairs, used = [], set()
        for time in times:
            cel = cls.get_cel_name(scene.drawing_name(drawing_column, time))
            if cel and cel not in used:
                used.add(cel)
                pairs.append(KeyframeCelPair(time, cel))
        return pairs
