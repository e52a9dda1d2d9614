"""Building blocks for presentation scripts.

A presentation script imports these helpers and describes its slides as
lists of commands, for example::

    from commands.factories import view, change_view, fade_in, fade_out

    intro = view("intro").set_scale(1.2)

    SCENE = "talk.svg"
    SLIDES = [
        [fade_out(["details"], duration=0)],
        [change_view(intro), fade_in(["details"])],
    ]
"""

from typing import List, Optional, Sequence

from commands.base_command import Command
from commands.slide_commands import (
    ChangeViewCommand, FadeCommand, InvertCommand, MoveCommand, SetColorCommand, ToggleLogoCommand,
)
from core.constants import (
    DEFAULT_COLOR_DURATION_MS, DEFAULT_FADE_DURATION_MS, DEFAULT_MOVE_DURATION_MS, DEFAULT_VIEW_DELAY_MS,
    DEFAULT_VIEW_SLOWDOWN,
)
from data_models.presentation_state import View

__all__ = [
    "view", "change_view", "fade_in", "fade_out", "set_color", "move", "toggle_logo",
    "align_vertically", "align_horizontally", "invert",
]


def view(id: str) -> View:
    return View(id)


def change_view(view: View, delay: float = DEFAULT_VIEW_DELAY_MS,
                slowdown: float = DEFAULT_VIEW_SLOWDOWN) -> ChangeViewCommand:
    return ChangeViewCommand(view, delay, slowdown)


def fade_in(ids: Sequence[str], duration: float = DEFAULT_FADE_DURATION_MS, delay: float = 0) -> FadeCommand:
    return FadeCommand(ids, 1.0, duration, delay)


def fade_out(ids: Sequence[str], duration: float = DEFAULT_FADE_DURATION_MS, delay: float = 0) -> FadeCommand:
    return FadeCommand(ids, 0.0, duration, delay)


def set_color(ids: Sequence[str], color: str, duration: float = DEFAULT_COLOR_DURATION_MS) -> SetColorCommand:
    return SetColorCommand(ids, color, duration)


def move(id: str, target_x: str, target_y: Optional[str] = None,
         duration: float = DEFAULT_MOVE_DURATION_MS) -> MoveCommand:
    """Moves ``id`` to the x of ``target_x`` and the y of ``target_y`` (default: ``target_x``)."""
    return MoveCommand(id, target_x, target_x if target_y is None else target_y, duration)


def toggle_logo() -> ToggleLogoCommand:
    return ToggleLogoCommand()


def align_vertically(id: str, *others: str) -> List[MoveCommand]:
    """One move per element in ``others``: keeps its x, takes the y of ``id``."""
    return [MoveCommand(other, other, id) for other in others]


def align_horizontally(id: str, *others: str) -> List[MoveCommand]:
    """One move per element in ``others``: takes the x of ``id``, keeps its y."""
    return [MoveCommand(other, id, other) for other in others]


def invert(action: Command) -> InvertCommand:
    return InvertCommand(action)
