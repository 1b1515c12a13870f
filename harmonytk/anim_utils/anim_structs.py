# coding=utf-8
"""Shared data structures for animation utilities."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class ChannelConfig:
    """How a peg lays out its transform channels."""

    is_3d: bool = False
    position_separate: bool = False
    scale_separate: bool = False
    rotation_separate: bool = False

    @property
    def position_attrs(self) -> Tuple[str, ...]:
        if self.position_separate:
            return ("position.x", "position.y", "position.z")
        return ("position.attr3dpath",)

    @property
    def scale_attrs(self) -> Tuple[str, ...]:
        if not self.scale_separate:
            return ("scale.xy",)
        if self.is_3d:
            return ("scale.x", "scale.y", "scale.z")
        return ("scale.x", "scale.y")

    @property
    def rotation_attrs(self) -> Tuple[str, ...]:
        if not self.is_3d:
            return ("rotation.anglez",)
        if self.rotation_separate:
            return ("rotation.anglex", "rotation.angley", "rotation.anglez")
        return ("rotation.quaternionpath",)

    @property
    def channel_attrs(self) -> Tuple[str, ...]:
        """The ordered animated attributes: position, scale, rotation, then skew."""
        return self.position_attrs + self.scale_attrs + self.rotation_attrs + ("skew",)


@dataclass(frozen=True)
class KeyframeCelPair:
    """A keyframe time paired with the cel exposed at that time."""

    time: int
    cel: str


@dataclass(frozen=True)
class SwitchBranch:
    """One input of a transformation switch and the cel names that select it."""

    index: int
    node: str
    cel: str
    expression: str


@dataclass
class StaticRigPlan:
    """Everything needed to build a static rig, resolved without touching the scene."""

    peg: str
    drawing: str
    config: ChannelConfig
    use_element: bool
    drawing_column: Optional[str]
    keyframe_times: List[int] = field(default_factory=list)
    pairs: List[KeyframeCelPair] = field(default_factory=list)

    @property
    def cels(self) -> List[str]:
        return [pair.cel for pair in self.pairs]


@dataclass
class StaticRigGraph:
    """The nodes created by one peg-to-static conversion."""

    group: str
    statics: List[str] = field(default_factory=list)
    switch: str = ""
    branches: List[SwitchBranch] = field(default_factory=list)
    clone: str = ""
    backup: str = ""
