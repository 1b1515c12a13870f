#!/usr/bin/env python
# coding=utf-8
"""Peg to Static Transformation.

Converts an animated peg into a set of Static Transformation nodes, one per
keyframe that has a drawing cel exposed on it, selected by a Transformation
Switch that reads the same drawing's timing. The result no longer depends on
the peg's keyframes, so it can't be animated by accident and survives
"Reset All Transformations".

Usage::

    from harmonytk.rig_utils.peg_to_static import peg_to_static
    peg_to_static(scene)  # with one peg and one drawing selected

                1    2    3    4    5    6    7    8
    Peg         #    #              #    #         #
    Drawing     |   CEL 1        |  CEL 2   |      | CEL 1 |

Static nodes are made for frames 1 and 5 only. Frame 2 and 8 show CEL 1,
already paired with frame 1. Frame 6 shows CEL 2, already paired with frame 5.
"""
import dataclasses
from typing import Iterable, Optional

import pythontk as ptk

from harmonytk.core_utils._core_utils import CoreUtils
from harmonytk.node_utils.scene_graph import SceneGraphService
from harmonytk.node_utils._node_utils import NodeUtils
from harmonytk.anim_utils._anim_utils import AnimUtils
from harmonytk.anim_utils.anim_structs import StaticRigGraph, StaticRigPlan
from harmonytk.rig_utils.static_nodes import StaticNodes
from harmonytk.rig_utils.transformation_switch import TransformationSwitch
from harmonytk.rig_utils.static_group import StaticGroup


class PegToStaticError(ValueError):
    """The selection or scene can't be converted. Nothing was modified."""


class SelectionError(PegToStaticError):
    pass


class NoKeyframesError(PegToStaticError):
    pass


class NoCelPairsError(PegToStaticError):
    pass


class PegToStatic(ptk.LoggingMixin):
    """Builds a static rig from one peg and one timing drawing."""

    PEG_TYPE = "PEG"
    DRAWING_TYPE = "READ"
    UNDO_LABEL = "Create Static-Transformation modules from peg keyframes"

    SELECTION_MESSAGE = (
        "Please select one Peg and one Drawing node.\n\n"
        "Each keyframe on the peg will be converted to a Static Transformation node "
        "that is connected to a single Transformation Switch node for switching.\n\n"
        "The drawing will be used by the Transformation Switch node as a timing "
        "reference for switching in between Static Transformation nodes."
    )
    NO_KEYFRAMES_MESSAGE = (
        "No keyframes found on the selected peg.\n"
        "Cannot create Static Transformation nodes."
    )
    NO_CEL_PAIRS_MESSAGE = (
        "No keyframe on the selected peg has a drawing cel exposed on the same frame.\n"
        "Cannot create Static Transformation nodes."
    )

    def __init__(self, scene: SceneGraphService, log_level="WARNING"):
        super().__init__()
        self.scene = scene
        self.static_nodes = StaticNodes(scene)
        self.switch = TransformationSwitch(scene)
        self.static_group = StaticGroup(scene)
        for component in (self, self.static_nodes, self.switch, self.static_group):
            component.logger.setLevel(log_level)

    def get_selection(self, selection: Optional[Iterable[str]] = None):
        """Return the ``(peg, drawing)`` pair from the selection.

        Parameters:
            selection (list): Node paths. Defaults to the scene's current selection.

        Raises:
            SelectionError: Unless exactly one peg and one drawing are selected.
        """
        if selection is None:
            selection = self.scene.selected_nodes()
        nodes = NodeUtils.get_nodes_by_type(
            self.scene, list(selection), [self.PEG_TYPE, self.DRAWING_TYPE]
        )
        pegs, drawings = nodes[self.PEG_TYPE], nodes[self.DRAWING_TYPE]
        if len(pegs) != 1 or len(drawings) != 1:
            raise SelectionError(self.SELECTION_MESSAGE)
        return pegs[0], drawings[0]

    def plan(self, selection: Optional[Iterable[str]] = None) -> StaticRigPlan:
        """Resolve everything the conversion needs without modifying the scene.

        Raises:
            SelectionError: Unless exactly one peg and one drawing are selected.
            NoKeyframesError: If the peg has no keyframes.
            NoCelPairsError: If no keyframe has a cel exposed on it.
        """
        peg, drawing = self.get_selection(selection)

        config = AnimUtils.get_channel_config(self.scene, peg)
        times = AnimUtils.collect_keyframe_times(self.scene, peg, config)
        if not times:
            raise NoKeyframesError(self.NO_KEYFRAMES_MESSAGE)

        use_element, column = AnimUtils.get_drawing_column(self.scene, drawing)
        pairs = AnimUtils.pair_keys_to_cels(self.scene, times, column)
        if not pairs:
            raise NoCelPairsError(self.NO_CEL_PAIRS_MESSAGE)

        skipped = sorted(set(times) - {pair.time for pair in pairs})
        if skipped:
            self.logger.debug(f"Keyframes without a new cel, skipped: {skipped}")

        return StaticRigPlan(peg, drawing, config, use_element, column, times, pairs)

    def run(self, selection: Optional[Iterable[str]] = None) -> StaticRigGraph:
        """Validate the selection and build the static rig as one undo step."""
        return self.build(self.plan(selection))

    @CoreUtils.undoable
    def build(self, plan: StaticRigPlan) -> StaticRigGraph:
        """Create the static nodes, switch and group described by the plan.

        Parameters:
            plan (StaticRigPlan): The resolved conversion, see :meth:`plan`.

        Returns:
            (StaticRigGraph) The created nodes, at their final paths inside the group.
        """
        peg, drawing = plan.peg, plan.drawing
        parent = self.scene.parent_group(peg)
        src = self.scene.src_node_info(peg, 0)
        dst = self.scene.dst_node_info(peg, 0, 0)
        peg_coord = self.scene.coord(peg)

        statics, coord = [], None
        for pair in plan.pairs:
            static = self.static_nodes.create_static(
                peg, parent, plan.config, pair.time, src, coord
            )
            statics.append(static)
            coord = self.scene.coord(static)

        switch, branches = self.switch.create_switch(
            parent, statics, plan.cels, drawing, src, dst
        )

        group = self.static_group.wrap_in_group(
            peg, parent, statics + [switch], peg_coord
        )

        def in_group(node: str) -> str:
            return f"{group}/{self.scene.node_name(node)}"

        statics = [in_group(static) for static in statics]
        switch = in_group(switch)
        branches = [dataclasses.replace(b, node=in_group(b.node)) for b in branches]

        clone = self.static_group.create_clone_drawing(drawing, switch, group)
        backup = self.static_group.retire_peg(peg)
        self.scene.clear_selection()

        self.logger.info(
            f"Converted {peg} into {len(statics)} static node(s) in {group}."
        )
        return StaticRigGraph(group, statics, switch, branches, clone, backup)


def peg_to_static(
    scene: SceneGraphService, log_level="WARNING"
) -> Optional[StaticRigGraph]:
    """Convert the selected peg using the selected drawing's timing.

    Validation problems are reported to the user through the scene's message box.

    Returns:
        (StaticRigGraph) The created nodes, or None when nothing was converted.
    """
    converter = PegToStatic(scene, log_level=log_level)
    try:
        return converter.run()
    except PegToStaticError as error:
        converter.logger.warning(str(error).splitlines()[0])
        scene.message_box(str(error))
        return None
