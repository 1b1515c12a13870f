# !/usr/bin/python
# coding=utf-8
"""Scene graph service interface.

Every harmonytk operation talks to the host node graph through a
:class:`SceneGraphService` passed in by the caller. A host binding implements
the abstract methods; :class:`harmonytk.node_utils.memory_scene.MemoryScene`
implements them in memory.

Node references are full paths (``"Top/Group/Peg-p"``), ports are ints and
frames are 1-based ints, mirroring the host scripting interface.
"""
import contextlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class Coordinate:
    """A node position in the node view."""

    x: float
    y: float

    def offset(self, dx: float = 0, dy: float = 0) -> "Coordinate":
        return Coordinate(self.x + dx, self.y + dy)

    @classmethod
    def average(cls, a: "Coordinate", b: "Coordinate") -> "Coordinate":
        return cls((a.x + b.x) / 2, (a.y + b.y) / 2)


@dataclass(frozen=True)
class NodePort:
    """One end of a link: a node path and the port index on that node."""

    node: str
    port: int = 0


class SceneGraphService(ABC):
    """Abstract access to the host's node graph."""

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @abstractmethod
    def selected_nodes(self) -> List[str]:
        """Return the paths of the currently selected nodes."""

    @abstractmethod
    def clear_selection(self) -> None:
        ...

    # ------------------------------------------------------------------
    # Node queries
    # ------------------------------------------------------------------

    @abstractmethod
    def node_type(self, node: str) -> str:
        """Return the host type of the node, e.g. ``"PEG"`` or ``"READ"``."""

    @abstractmethod
    def node_name(self, node: str) -> str:
        """Return the short name of the node (last path segment)."""

    @abstractmethod
    def parent_group(self, node: str) -> str:
        ...

    @abstractmethod
    def coord(self, node: str) -> Coordinate:
        ...

    @abstractmethod
    def set_coord(self, node: str, x: float, y: float) -> None:
        ...

    @abstractmethod
    def children(self, group: str) -> List[str]:
        """Return the paths of the nodes directly inside the group."""

    @abstractmethod
    def node_exists(self, node: str) -> bool:
        ...

    @abstractmethod
    def src_node_info(self, node: str, port: int = 0) -> Optional[NodePort]:
        """Return the node/port linked into the given input port, if any."""

    @abstractmethod
    def dst_node_info(
        self, node: str, port: int = 0, link: int = 0
    ) -> Optional[NodePort]:
        """Return the ``link``-th consumer of the given output port, if any."""

    # ------------------------------------------------------------------
    # Attributes and columns
    # ------------------------------------------------------------------

    @abstractmethod
    def get_attr(self, node: str, attr: str, frame: int = 1) -> Optional[str]:
        """Return the raw attribute value at frame, or None when unresolvable."""

    @abstractmethod
    def get_text_attr(self, node: str, attr: str, frame: int = 1) -> str:
        ...

    @abstractmethod
    def set_text_attr(self, node: str, attr: str, value, frame: int = 1) -> None:
        ...

    @abstractmethod
    def linked_column(self, node: str, attr: str) -> Optional[str]:
        """Return the name of the column driving the attribute, if any."""

    @abstractmethod
    def link_attr(self, node: str, attr: str, column: str) -> None:
        ...

    @abstractmethod
    def keyframe_times(self, column: str) -> List[int]:
        """Return the time of every keyframe point on the column."""

    @abstractmethod
    def column_entry(self, column: str, sub_column: int, frame: int) -> str:
        ...

    @abstractmethod
    def drawing_name(self, column: str, frame: int) -> str:
        """Return the exposed drawing file name at frame ('' when empty)."""

    # ------------------------------------------------------------------
    # Graph mutation
    # ------------------------------------------------------------------

    @abstractmethod
    def add_node(
        self, group: str, name: str, node_type: str, x: float, y: float
    ) -> str:
        """Create a node and return its path."""

    @abstractmethod
    def link(self, src: str, src_port: int, dst: str, dst_port: int) -> None:
        ...

    @abstractmethod
    def unlink(self, dst: str, dst_port: int) -> None:
        """Remove the link feeding the given input port."""

    @abstractmethod
    def rename(self, node: str, new_name: str) -> str:
        """Rename the node and return its new path."""

    @abstractmethod
    def create_group(self, nodes: List[str], name: str) -> str:
        """Move the nodes into a new group and return the group path."""

    @abstractmethod
    def delete_node(self, node: str) -> None:
        ...

    @abstractmethod
    def set_enabled(self, node: str, enabled: bool) -> None:
        ...

    @abstractmethod
    def set_animatable(self, node: str, animatable: bool) -> None:
        ...

    # ------------------------------------------------------------------
    # Undo and user feedback
    # ------------------------------------------------------------------

    @abstractmethod
    def begin_undo(self, label: str) -> None:
        ...

    @abstractmethod
    def end_undo(self) -> None:
        ...

    @abstractmethod
    def cancel_undo(self) -> None:
        """Close the open accumulation and revert everything it recorded."""

    @abstractmethod
    def message_box(self, text: str) -> None:
        ...

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def get_bool_attr(self, node: str, attr: str, frame: int = 1) -> bool:
        """Read an attribute as a boolean. Unresolvable attributes read False."""
        value = self.get_attr(node, attr, frame)
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in ("true", "on", "1", "yes")

    def child_names(self, group: str) -> List[str]:
        return [self.node_name(child) for child in self.children(group)]

    @contextlib.contextmanager
    def undo_chunk(self, label: str) -> Iterator[None]:
        """Accumulate every mutation made in the block into one undo entry.

        The accumulation is cancelled, reverting the scene, if the block raises.
        """
        self.begin_undo(label)
        try:
            yield
        except BaseException:
            self.cancel_undo()
            raise
        self.end_undo()
