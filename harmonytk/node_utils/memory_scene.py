# !/usr/bin/python
# coding=utf-8
"""In-memory scene graph.

``MemoryScene`` implements :class:`SceneGraphService` without a host. It models
the parts of the Harmony node view the harmonytk operations rely on:

    scene = MemoryScene()
    scene.add_column("peg_x", {1: 0.0, 10: 4.5})
    peg = scene.add_node("Top", "Arm-p", "PEG", 0, 0)
    scene.link_attr(peg, "position.x", "peg_x")
    scene.select([peg, drawing])

Columns hold keyframe values by frame. Function columns hold the last key at
or before a frame; drawing columns only report an exposure on frames that were
explicitly exposed. 3D path and quaternion columns hold ``(x, y, z)`` tuples,
read back one axis at a time through sub-columns or ``*.3dpath.<axis>``.
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pythontk as ptk

from harmonytk.node_utils.scene_graph import Coordinate, NodePort, SceneGraphService


@dataclass
class _NodeRecord:
    node_type: str
    coord: Coordinate
    attrs: Dict[str, Any] = field(default_factory=dict)
    links: Dict[str, str] = field(default_factory=dict)
    inputs: Dict[int, NodePort] = field(default_factory=dict)
    enabled: bool = True


@dataclass
class _ColumnRecord:
    column_type: str
    keys: Dict[int, Any] = field(default_factory=dict)


class MemoryScene(SceneGraphService):
    """A self-contained scene graph with snapshot based undo."""

    ROOT = "Top"
    GROUP_TYPE = "GROUP"
    DRAWING_COLUMN = "DRAWING"

    # Attribute prefixes that read one axis of a linked path column.
    PATH_ALIASES = {"position.3dpath": "position.attr3dpath"}
    AXES = ("x", "y", "z")

    # Nodes the host adds to every new group.
    GROUP_DEFAULTS = (
        ("Multi-Port-In", "MULTIPORT_IN", (0, -100)),
        ("Multi-Port-Out", "MULTIPORT_OUT", (0, 300)),
        ("Composite", "COMPOSITE", (0, 200)),
    )

    def __init__(self, log_level=logging.WARNING):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(log_level)
        self._nodes: Dict[str, _NodeRecord] = {
            self.ROOT: _NodeRecord(self.GROUP_TYPE, Coordinate(0, 0))
        }
        self._columns: Dict[str, _ColumnRecord] = {}
        self._selection: List[str] = []
        self._undo_snapshot: Optional[dict] = None
        self._undo_label = ""
        self._undo_depth = 0
        self.undo_history: List[str] = []
        self.messages: List[str] = []

    # ------------------------------------------------------------------
    # Scene building helpers (not part of the service interface)
    # ------------------------------------------------------------------

    def add_column(
        self, name: str, keys: Dict[int, Any], column_type: str = "BEZIER"
    ) -> str:
        """Create a column from ``{frame: value}`` keys and return its name."""
        if name in self._columns:
            raise ValueError(f"Column '{name}' already exists.")
        self._columns[name] = _ColumnRecord(column_type, dict(keys))
        return name

    def add_drawing_column(self, name: str, exposures: Dict[int, str]) -> str:
        """Create a drawing column from ``{frame: drawing file name}``."""
        return self.add_column(name, exposures, column_type=self.DRAWING_COLUMN)

    def select(self, nodes: List[str]) -> None:
        for node in ptk.make_iterable(nodes):
            self._require(node)
        self._selection = list(ptk.make_iterable(nodes))

    def is_enabled(self, node: str) -> bool:
        return self._require(node).enabled

    def state(self) -> dict:
        """Return a deep copy of everything the undo accumulation covers."""
        return copy.deepcopy(
            {
                "nodes": self._nodes,
                "columns": self._columns,
                "selection": self._selection,
            }
        )

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def selected_nodes(self) -> List[str]:
        return list(self._selection)

    def clear_selection(self) -> None:
        self._selection = []

    # ------------------------------------------------------------------
    # Node queries
    # ------------------------------------------------------------------

    def node_type(self, node: str) -> str:
        return self._require(node).node_type

    def node_name(self, node: str) -> str:
        return node.rsplit("/", 1)[-1]

    def parent_group(self, node: str) -> str:
        self._require(node)
        return node.rsplit("/", 1)[0] if "/" in node else ""

    def coord(self, node: str) -> Coordinate:
        return self._require(node).coord

    def set_coord(self, node: str, x: float, y: float) -> None:
        self._require(node).coord = Coordinate(x, y)

    def children(self, group: str) -> List[str]:
        prefix = group + "/"
        return [
            path
            for path in self._nodes
            if path.startswith(prefix) and "/" not in path[len(prefix) :]
        ]

    def node_exists(self, node: str) -> bool:
        return node in self._nodes

    def src_node_info(self, node: str, port: int = 0) -> Optional[NodePort]:
        return self._require(node).inputs.get(port)

    def dst_node_info(
        self, node: str, port: int = 0, link: int = 0
    ) -> Optional[NodePort]:
        self._require(node)
        consumers = self._consumers(node, port)
        return consumers[link] if link < len(consumers) else None

    # ------------------------------------------------------------------
    # Attributes and columns
    # ------------------------------------------------------------------

    def get_attr(self, node: str, attr: str, frame: int = 1) -> Optional[Any]:
        record = self._require(node)
        if attr in record.links:
            return self._evaluate(record.links[attr], frame)

        parent, _, axis = attr.rpartition(".")
        path_attr = self.PATH_ALIASES.get(parent)
        if path_attr in record.links and axis in self.AXES:
            value = self._evaluate(record.links[path_attr], frame)
            return None if value is None else value[self.AXES.index(axis)]

        return record.attrs.get(attr)

    def get_text_attr(self, node: str, attr: str, frame: int = 1) -> str:
        return self._to_text(self.get_attr(node, attr, frame))

    def set_text_attr(self, node: str, attr: str, value, frame: int = 1) -> None:
        record = self._require(node)
        text = self._to_text(value)
        if attr in record.links:
            self._columns[record.links[attr]].keys[frame] = text
        else:
            record.attrs[attr] = text

    def linked_column(self, node: str, attr: str) -> Optional[str]:
        return self._require(node).links.get(attr)

    def link_attr(self, node: str, attr: str, column: str) -> None:
        record = self._require(node)
        if column not in self._columns:
            raise KeyError(f"Column '{column}' does not exist.")
        record.links[attr] = column

    def keyframe_times(self, column: str) -> List[int]:
        record = self._columns.get(column)
        if record is None or record.column_type == self.DRAWING_COLUMN:
            return []
        return sorted(record.keys)

    def column_entry(self, column: str, sub_column: int, frame: int) -> str:
        value = self._evaluate(column, frame)
        if isinstance(value, (tuple, list)):
            value = value[sub_column - 1]
        return self._to_text(value)

    def drawing_name(self, column: str, frame: int) -> str:
        record = self._columns.get(column)
        if record is None:
            return ""
        return record.keys.get(frame) or ""

    # ------------------------------------------------------------------
    # Graph mutation
    # ------------------------------------------------------------------

    def add_node(
        self, group: str, name: str, node_type: str, x: float, y: float
    ) -> str:
        if self._require(group).node_type != self.GROUP_TYPE:
            raise ValueError(f"'{group}' is not a group.")
        path = f"{group}/{name}"
        if path in self._nodes:
            raise ValueError(f"Node '{path}' already exists.")
        self._nodes[path] = _NodeRecord(
            node_type, Coordinate(x, y), attrs={"canAnimate": "TRUE"}
        )
        self.logger.debug(f"Added {node_type} node: {path}")
        return path

    def link(self, src: str, src_port: int, dst: str, dst_port: int) -> None:
        self._require(src)
        record = self._require(dst)
        if dst_port in record.inputs:
            raise ValueError(f"Input port {dst_port} of '{dst}' is already linked.")
        record.inputs[dst_port] = NodePort(src, src_port)
        self.logger.debug(f"Linked {src}[{src_port}] -> {dst}[{dst_port}]")

    def unlink(self, dst: str, dst_port: int) -> None:
        self._require(dst).inputs.pop(dst_port, None)

    def rename(self, node: str, new_name: str) -> str:
        self._require(node)
        parent = self.parent_group(node)
        new_path = f"{parent}/{new_name}" if parent else new_name
        if new_path in self._nodes:
            raise ValueError(f"Node '{new_path}' already exists.")
        self._move(node, new_path)
        return new_path

    def create_group(self, nodes: List[str], name: str) -> str:
        if not nodes:
            raise ValueError("Cannot create an empty group.")
        parents = {self.parent_group(node) for node in nodes}
        if len(parents) != 1:
            raise ValueError("Grouped nodes must share one parent group.")
        group = f"{parents.pop()}/{name}"
        if group in self._nodes:
            raise ValueError(f"Node '{group}' already exists.")

        self._nodes[group] = _NodeRecord(self.GROUP_TYPE, Coordinate(0, 0))
        for node in nodes:
            self._move(node, f"{group}/{self.node_name(node)}")

        for default_name, default_type, (x, y) in self.GROUP_DEFAULTS:
            self.add_node(group, default_name, default_type, x, y)
        self.link(f"{group}/Composite", 0, f"{group}/Multi-Port-Out", 1)
        return group

    def delete_node(self, node: str) -> None:
        self._require(node)
        prefix = node + "/"
        doomed = [p for p in self._nodes if p == node or p.startswith(prefix)]
        for path in doomed:
            del self._nodes[path]
        for record in self._nodes.values():
            for port, src in list(record.inputs.items()):
                if src.node in doomed:
                    del record.inputs[port]
        self._selection = [n for n in self._selection if n not in doomed]

    def set_enabled(self, node: str, enabled: bool) -> None:
        self._require(node).enabled = bool(enabled)

    def set_animatable(self, node: str, animatable: bool) -> None:
        self._require(node).attrs["canAnimate"] = self._to_text(bool(animatable))

    # ------------------------------------------------------------------
    # Undo and user feedback
    # ------------------------------------------------------------------

    def begin_undo(self, label: str) -> None:
        if self._undo_depth == 0:
            self._undo_snapshot = self.state()
            self._undo_label = label
        self._undo_depth += 1

    def end_undo(self) -> None:
        if self._undo_depth == 0:
            raise RuntimeError("No undo accumulation is open.")
        self._undo_depth -= 1
        if self._undo_depth == 0:
            self.undo_history.append(self._undo_label)
            self._undo_snapshot = None

    def cancel_undo(self) -> None:
        if self._undo_depth == 0:
            raise RuntimeError("No undo accumulation is open.")
        if self._undo_depth > 1:
            # Only the outermost accumulation restores the snapshot.
            self._undo_depth -= 1
            return
        snapshot = self._undo_snapshot
        self._nodes = snapshot["nodes"]
        self._columns = snapshot["columns"]
        self._selection = snapshot["selection"]
        self._undo_snapshot = None
        self._undo_depth = 0
        self.logger.debug(f"Reverted undo accumulation: {self._undo_label}")

    def message_box(self, text: str) -> None:
        self.messages.append(text)
        self.logger.info(text)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, node: str) -> _NodeRecord:
        try:
            return self._nodes[node]
        except KeyError:
            raise KeyError(f"Node '{node}' does not exist.") from None

    def _consumers(self, node: str, port: int) -> List[NodePort]:
        return [
            NodePort(path, dst_port)
            for path, record in self._nodes.items()
            for dst_port, src in sorted(record.inputs.items())
            if src == NodePort(node, port)
        ]

    def _evaluate(self, column: str, frame: int) -> Optional[Any]:
        record = self._columns.get(column)
        if record is None or not record.keys:
            return None
        if record.column_type == self.DRAWING_COLUMN:
            return record.keys.get(frame)
        held = [f for f in record.keys if f <= frame]
        return record.keys[max(held) if held else min(record.keys)]

    def _move(self, old: str, new: str) -> None:
        """Re-key a node (and its descendants) and every reference to it."""

        def moved(path: str) -> str:
            if path == old:
                return new
            if path.startswith(old + "/"):
                return new + path[len(old) :]
            return path

        self._nodes = {moved(path): record for path, record in self._nodes.items()}
        for record in self._nodes.values():
            record.inputs = {
                port: NodePort(moved(src.node), src.port)
                for port, src in record.inputs.items()
            }
        self._selection = [moved(n) for n in self._selection]

    @staticmethod
    def _to_text(value) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        return str(value)
