"""In-memory Scene used by the core tests.

Animations take effect immediately and every call is recorded, so tests can
check both the final state and what was asked of the renderer.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.errors import ElementNotFound
from core.geometry import Matrix, Rect, ViewportTriple, absolute_transform
from core.scene import Scene, SceneNode, parse_opacity


class FakeNode(SceneNode):
    def __init__(self, scene: "FakeScene", node_id: str, bbox: Rect, tag: str = "g",
                 parent: Optional["FakeNode"] = None, style: Optional[Dict[str, str]] = None,
                 transforms: Optional[List[Matrix]] = None):
        self._scene = scene
        self._id = node_id
        self.bbox = bbox
        self.tag = tag
        self._parent = parent
        self.style: Dict[str, str] = dict(style or {})
        self.transforms: List[Matrix] = list(transforms or [])
        self.children: List[FakeNode] = []

    @property
    def node_id(self) -> Optional[str]:
        return self._id

    def bounding_box(self) -> Rect:
        return self.bbox

    def bounding_client_rect(self) -> Rect:
        matrix = absolute_transform(self)
        b = self.bbox
        corners = [matrix.apply(x, y) for x in (b.x, b.x + b.width) for y in (b.y, b.y + b.height)]
        xs = [p[0] for p in corners]
        ys = [p[1] for p in corners]
        return Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def transform_list(self) -> List[Matrix]:
        return list(self.transforms)

    def parent(self) -> Optional["FakeNode"]:
        return self._parent

    def animate(self, attribute: str, value: Any, duration: float, delay: float = 0) -> None:
        self._scene.calls.append((self._id, attribute, value, duration, delay))
        if attribute == "transform":
            self.transforms = [value]
        elif attribute == "opacity":
            self.style["opacity"] = repr(float(value))
        elif attribute == "fill":
            self.style["fill"] = str(value)
        else:
            raise ValueError(attribute)

    def get_style(self, name: str) -> Optional[str]:
        return self.style.get(name)

    def children_matching(self, selector: str) -> List["FakeNode"]:
        found: List[FakeNode] = []
        for child in self.children:
            if child.tag == selector:
                found.append(child)
            found.extend(child.children_matching(selector))
        return found

    def opacity(self) -> float:
        return parse_opacity(self.style.get("opacity"))

    def __repr__(self) -> str:
        return f"FakeNode({self._id!r})"


class FakeScene(Scene):
    def __init__(self, width: float = 1000, height: float = 500):
        self.rect = Rect(0.0, 0.0, float(width), float(height))
        self.nodes: Dict[str, FakeNode] = {}
        self.calls: List[tuple] = []
        self.viewport_calls: List[tuple] = []
        self.viewport: Optional[ViewportTriple] = None

    def add(self, node_id: str, x: float, y: float, width: float, height: float, parent: Optional[str] = None,
            tag: str = "g", style: Optional[Dict[str, str]] = None,
            transforms: Optional[List[Matrix]] = None) -> FakeNode:
        parent_node = self.nodes[parent] if parent else None
        node = FakeNode(self, node_id, Rect(x, y, width, height), tag=tag, parent=parent_node,
                        style=style, transforms=transforms)
        if parent_node is not None:
            parent_node.children.append(node)
        self.nodes[node_id] = node
        return node

    def select_by_id(self, element_id: str) -> FakeNode:
        try:
            return self.nodes[element_id]
        except KeyError:
            raise ElementNotFound(element_id) from None

    def viewport_rect(self) -> Rect:
        return self.rect

    def animate_viewport(self, start, end, delay, slowdown) -> None:
        self.viewport_calls.append((tuple(start), tuple(end), delay, slowdown))
        self.viewport = ViewportTriple(*end)
