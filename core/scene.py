from abc import ABC, abstractmethod
from typing import Any, List, Optional

from core.constants import DEFAULT_OPACITY
from core.errors import PresentationError
from core.geometry import Matrix, Rect, ViewportTriple


def parse_opacity(value: Optional[str], default: float = DEFAULT_OPACITY) -> float:
    """Reads an opacity style value, either a number or a percentage."""
    if not value or not value.strip():
        return default
    text = value.strip()
    try:
        if text.endswith("%"):
            return float(text[:-1]) / 100
        return float(text)
    except ValueError:
        raise PresentationError(f"Unreadable opacity '{value}'") from None


class SceneNode(ABC):
    """Handle on one element of the rendered scene graph.

    Handles are cheap to create and may be discarded at any time; every
    method reads or writes the live element.
    """

    @property
    @abstractmethod
    def node_id(self) -> Optional[str]:
        pass

    @abstractmethod
    def bounding_box(self) -> Rect:
        """Bounding box in the node's own user space, before its transform list."""
        pass

    @abstractmethod
    def bounding_client_rect(self) -> Rect:
        """Bounding box in viewport (document) coordinates, all transforms applied."""
        pass

    @abstractmethod
    def transform_list(self) -> List[Matrix]:
        pass

    @abstractmethod
    def parent(self) -> Optional['SceneNode']:
        pass

    @abstractmethod
    def animate(self, attribute: str, value: Any, duration: float, delay: float = 0) -> None:
        """Starts a transition of ``attribute`` towards ``value`` and returns immediately.

        ``attribute`` is one of ``"transform"`` (value: Matrix), ``"opacity"``
        (value: float) or ``"fill"`` (value: colour string). Durations and
        delays are in milliseconds.
        """
        pass

    @abstractmethod
    def get_style(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def children_matching(self, selector: str) -> List['SceneNode']:
        """Descendants with the given tag name, in document order."""
        pass


class Scene(ABC):
    """The rendering collaborator driven by the presentation commands."""

    @abstractmethod
    def select_by_id(self, element_id: str) -> SceneNode:
        """Returns the node with ``element_id`` or raises ElementNotFound."""
        pass

    @abstractmethod
    def viewport_rect(self) -> Rect:
        """Rectangle of the whole document in viewport coordinates at the initial zoom."""
        pass

    @abstractmethod
    def animate_viewport(self, start: ViewportTriple, end: ViewportTriple,
                         delay: float, slowdown: float) -> None:
        """Starts a smooth pan/zoom from ``start`` to ``end`` and returns immediately."""
        pass
