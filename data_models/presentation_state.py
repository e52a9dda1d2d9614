from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from core.constants import DEFAULT_VIEW_SCALE
from core.geometry import ViewportTriple

if TYPE_CHECKING:
    from commands.base_command import Command


class View:
    """A named region of the scene that a ChangeViewCommand zooms to.

    ``scale`` is the margin factor around the element: 1.0 frames it edge to
    edge, 1.2 leaves 20% of room.
    """

    def __init__(self, id: str, scale: float = DEFAULT_VIEW_SCALE):
        if scale <= 0:
            raise ValueError(f"View scale must be positive, got {scale}")
        self._id = id
        self._scale = float(scale)

    @property
    def id(self) -> str:
        return self._id

    @property
    def scale(self) -> float:
        return self._scale

    def set_scale(self, scale: float) -> 'View':
        if scale <= 0:
            raise ValueError(f"View scale must be positive, got {scale}")
        self._scale = float(scale)
        return self

    def __repr__(self):
        return f"View({self._id!r}, scale={self._scale})"


@dataclass
class SequencerState:
    """Mutable state of a running presentation."""
    current_index: int = -1
    viewport: Optional[ViewportTriple] = None


@dataclass
class ActionFailure:
    """A contained error raised by one command while a slide was played."""
    slide_index: int
    command: 'Command'
    phase: str  # "wire", "execute" or "undo"
    error: Exception = field(repr=False)

    def describe(self) -> str:
        return f"slide {self.slide_index}: {self.command!r} failed during {self.phase}: {self.error}"
