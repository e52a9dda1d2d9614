import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from commands.base_command import Command
from core.constants import (
    ATTR_FILL, ATTR_OPACITY, ATTR_TRANSFORM, DEFAULT_COLOR_DURATION_MS, DEFAULT_FADE_DURATION_MS,
    DEFAULT_FILL, DEFAULT_MOVE_DURATION_MS, DEFAULT_VIEW_DELAY_MS, DEFAULT_VIEW_SLOWDOWN,
    FILL_SELECTOR,
)
from core.errors import GeometryDegenerate, PresentationError
from core.geometry import (
    Matrix, ViewportTriple, absolute_position, ancestor_transform, compose, cumulative_transform, fit_viewport,
)
from core.scene import parse_opacity

if TYPE_CHECKING:
    from core.scene import SceneNode
    from data_models.presentation_state import View


class MoveCommand(Command):
    """Moves an element so it lines up with the x of one element and the y of another."""

    def __init__(self, elem: str, target_x: str, target_y: str, duration: float = DEFAULT_MOVE_DURATION_MS):
        super().__init__()
        self.elem = elem
        self.target_x = target_x
        self.target_y = target_y
        self.duration = duration
        # Transform of the element before the first execute()
        self.back: Optional[Matrix] = None

    @property
    def is_armed(self) -> bool:
        return self.back is not None

    def execute(self):
        logging.debug(f"Executing {self!r}")
        node = self.scene.select_by_id(self.elem)
        target_x_pos = absolute_position(self.scene.select_by_id(self.target_x))
        target_y_pos = absolute_position(self.scene.select_by_id(self.target_y))

        back = self.back if self.back is not None else cumulative_transform(node)

        # Where the element sits under its untouched transform
        placed = compose(ancestor_transform(node), back)
        if placed.a == 0 or placed.d == 0:
            raise GeometryDegenerate(f"Cannot move '{self.elem}' along both axes under {placed.to_svg()}")
        bbox = node.bounding_box()
        elem_x, elem_y = placed.apply(bbox.x, bbox.y)

        self.back = back
        dx = (target_x_pos[0] - elem_x) / placed.a
        dy = (target_y_pos[1] - elem_y) / placed.d
        node.animate(ATTR_TRANSFORM, compose(back, Matrix.translate(dx, dy)), self.duration)

    def undo(self):
        self._require_armed()
        logging.debug(f"Undoing {self!r}")
        self.scene.select_by_id(self.elem).animate(ATTR_TRANSFORM, self.back, DEFAULT_MOVE_DURATION_MS)

    def __repr__(self):
        return f"MoveCommand({self.elem!r}, x={self.target_x!r}, y={self.target_y!r})"


class FadeCommand(Command):
    """Transitions the opacity of several elements to one value."""

    def __init__(self, ids: Sequence[str], val: float, duration: float = DEFAULT_FADE_DURATION_MS,
                 delay: float = 0):
        super().__init__()
        if not 0.0 <= val <= 1.0:
            raise ValueError(f"Opacity must lie in [0, 1], got {val}")
        self.ids = list(ids)
        self.val = float(val)
        self.duration = duration
        self.delay = delay
        self.old_vals: Optional[Dict[str, float]] = None

    @property
    def is_armed(self) -> bool:
        return self.old_vals is not None

    def execute(self):
        logging.debug(f"Executing {self!r}")
        if self.old_vals is None or self.RECAPTURE_ON_EXECUTE:
            old_vals = {}
            for id in self.ids:
                old_vals[id] = parse_opacity(self.scene.select_by_id(id).get_style(ATTR_OPACITY))
            self.old_vals = old_vals
        for id in self.ids:
            self.scene.select_by_id(id).animate(ATTR_OPACITY, self.val, self.duration, self.delay)

    def undo(self):
        self._require_armed()
        logging.debug(f"Undoing {self!r}")
        for id in self.ids:
            self.scene.select_by_id(id).animate(ATTR_OPACITY, self.old_vals[id], self.duration, self.delay)

    def __repr__(self):
        return f"FadeCommand({self.ids!r}, val={self.val})"


class SetColorCommand(Command):
    """Recolors the filled paths inside several elements.

    Unlike moves and fades, the previous fills are read again on every
    execute(), so undo() returns to the colors seen by the latest execute().
    """
    RECAPTURE_ON_EXECUTE = True

    def __init__(self, ids: Sequence[str], val: str, duration: float = DEFAULT_COLOR_DURATION_MS):
        super().__init__()
        self.ids = list(ids)
        self.val = val
        self.duration = duration
        self.old_vals: Optional[List[Tuple['SceneNode', str]]] = None

    @property
    def is_armed(self) -> bool:
        return self.old_vals is not None

    def execute(self):
        logging.debug(f"Executing {self!r}")
        if self.old_vals is None or self.RECAPTURE_ON_EXECUTE:
            old_vals = []
            for id in self.ids:
                for child in self.scene.select_by_id(id).children_matching(FILL_SELECTOR):
                    old_vals.append((child, child.get_style(ATTR_FILL) or DEFAULT_FILL))
            self.old_vals = old_vals
        for child, _ in self.old_vals:
            child.animate(ATTR_FILL, self.val, self.duration)

    def undo(self):
        self._require_armed()
        logging.debug(f"Undoing {self!r}")
        for child, old_val in self.old_vals:
            child.animate(ATTR_FILL, old_val, self.duration)

    def __repr__(self):
        return f"SetColorCommand({self.ids!r}, val={self.val!r})"


class ChangeViewCommand(Command):
    """Pans and zooms the viewport so that a view fills the window.

    ``pos`` and ``old_pos`` are filled in by PresentationManager.wire():
    ``old_pos`` is the viewport this command returns to on undo.
    """

    def __init__(self, view: 'View', delay: float = DEFAULT_VIEW_DELAY_MS, slowdown: float = DEFAULT_VIEW_SLOWDOWN):
        super().__init__()
        self.view = view
        self.delay = delay
        self.slowdown = slowdown
        self.pos: Optional[ViewportTriple] = None
        self.old_pos: Optional[ViewportTriple] = None
        self._executed = False

    @property
    def is_armed(self) -> bool:
        return self._executed

    def compute_pos(self) -> ViewportTriple:
        bounding_rect = self.scene.select_by_id(self.view.id).bounding_client_rect()
        self.pos = fit_viewport(bounding_rect, self.view.scale, self.scene.viewport_rect())
        return self.pos

    def execute(self):
        if self.pos is None or self.old_pos is None:
            raise PresentationError(f"View '{self.view.id}' was not wired to a target viewport")
        logging.debug(f"Executing {self!r} -> {self.pos}")
        state = self.context.state
        self.scene.animate_viewport(state.viewport, self.pos, self.delay, self.slowdown)
        state.viewport = self.pos
        self._executed = True

    def undo(self):
        self._require_armed()
        logging.debug(f"Undoing {self!r} -> {self.old_pos}")
        state = self.context.state
        self.scene.animate_viewport(state.viewport, self.old_pos, self.delay, self.slowdown)
        state.viewport = self.old_pos

    def __repr__(self):
        return f"ChangeViewCommand({self.view!r})"


class ToggleLogoCommand(Command):
    """Shows or hides the logo overlay; it is its own inverse."""

    @property
    def is_armed(self) -> bool:
        return True

    def _toggle(self):
        if self.context is None:
            raise PresentationError("ToggleLogoCommand is not attached to a presentation")
        if self.context.notifier is None:
            logging.debug("ToggleLogoCommand: no overlay notifier, nothing to toggle")
            return
        self.context.notifier.toggle()

    def execute(self):
        self._toggle()

    def undo(self):
        self._toggle()

    def __repr__(self):
        return "ToggleLogoCommand()"


class InvertCommand(Command):
    """Plays another command backwards: execute() undoes it, undo() executes it."""

    def __init__(self, action: Command):
        super().__init__()
        self.action = action

    def attach(self, context):
        super().attach(context)
        self.action.attach(context)

    @property
    def is_armed(self) -> bool:
        return True

    def execute(self):
        self.action.undo()

    def undo(self):
        self.action.execute()

    def __repr__(self):
        return f"InvertCommand({self.action!r})"
