# Drives a loaded presentation: wires its commands to the scene and steps through slides.
import logging
from typing import Iterable, List, Optional, Sequence, Union

from PySide6.QtCore import QObject, Signal

from commands.base_command import Command
from commands.slide_commands import ChangeViewCommand
from core.errors import PresentationError, PrecondNotArmed
from core.geometry import ViewportTriple, initial_viewport
from core.overlay_notifier import OverlayNotifier
from core.presentation_context import PresentationContext
from core.scene import Scene
from data_models.presentation_state import ActionFailure, SequencerState

Slide = List[Command]


def flatten_slide(slide: Iterable[Union[Command, Iterable]]) -> Slide:
    """Returns the commands of a slide in order, expanding nested lists such as align_vertically()."""
    result: Slide = []
    for item in slide:
        if isinstance(item, Command):
            result.append(item)
        elif isinstance(item, (list, tuple)):
            result.extend(flatten_slide(item))
        else:
            raise TypeError(f"Slides may only contain commands, got {item!r}")
    return result


class PresentationManager(QObject):
    """
    Owns the slides of a presentation and the index of the slide on screen.
    advance() executes the commands of the next slide in order, retreat()
    undoes those of the current slide in reverse order. Slide 0 is the
    entry state and is never undone.
    """
    slide_changed = Signal(int) # Emits the new current index after navigation
    error_occurred = Signal(str) # Emitted when a command fails and the failure is contained

    def __init__(self, scene: Scene, notifier: Optional[OverlayNotifier] = None,
                 state: Optional[SequencerState] = None, strict: bool = False,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.scene = scene
        self.state = state if state is not None else SequencerState()
        self.context = PresentationContext(scene=scene, state=self.state, notifier=notifier)
        # In strict (developer) mode undo-before-execute bugs are raised instead of logged
        self.strict = strict
        self.slides: List[Slide] = []
        self.failures: List[ActionFailure] = []
        self._initial_viewport: Optional[ViewportTriple] = None

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def last_index(self) -> int:
        return len(self.slides) - 1

    def wire(self, slides: Sequence[Iterable[Command]], initial: Optional[ViewportTriple] = None):
        """
        Attaches every command to this presentation and computes the target and
        return viewports of every ChangeViewCommand, in playback order.
        Must run before any navigation; running it again recomputes the same values.
        """
        self.slides = [flatten_slide(slide) for slide in slides]
        if initial is None:
            initial = initial_viewport(self.scene.viewport_rect())
        self._initial_viewport = ViewportTriple(*initial)
        self.state.current_index = -1
        self.state.viewport = self._initial_viewport

        old_pos = self._initial_viewport
        view_count = 0
        for slide_index, slide in enumerate(self.slides):
            for action in slide:
                action.attach(self.context)
                if isinstance(action, ChangeViewCommand):
                    action.old_pos = old_pos
                    try:
                        old_pos = action.compute_pos()
                        view_count += 1
                    except PresentationError as e:
                        action.pos = None
                        self._record_failure(slide_index, action, "wire", e)
        logging.info(f"PresentationManager: wired {len(self.slides)} slides ({view_count} view changes)")

    def start(self, slides: Sequence[Iterable[Command]], initial: Optional[ViewportTriple] = None):
        """Wires the presentation and shows its first slide."""
        self.wire(slides, initial)
        self.advance()

    def advance(self) -> bool:
        if self.state.current_index >= self.last_index:
            return False
        self.state.current_index += 1
        index = self.state.current_index
        logging.info(f"PresentationManager: advancing to slide {index}/{self.last_index}")
        for action in self.slides[index]:
            self._run(index, action, "execute")
        self.slide_changed.emit(index)
        return True

    def retreat(self) -> bool:
        if self.state.current_index <= 0:
            return False
        index = self.state.current_index
        logging.info(f"PresentationManager: retreating from slide {index}")
        for action in reversed(self.slides[index]):
            self._run(index, action, "undo")
        self.state.current_index -= 1
        self.slide_changed.emit(self.state.current_index)
        return True

    def clear_failures(self):
        self.failures.clear()

    def _run(self, slide_index: int, action: Command, phase: str):
        try:
            getattr(action, phase)()
        except PrecondNotArmed as e:
            if self.strict:
                raise
            self._record_failure(slide_index, action, phase, e)
        except PresentationError as e:
            self._record_failure(slide_index, action, phase, e)

    def _record_failure(self, slide_index: int, action: Command, phase: str, error: Exception):
        failure = ActionFailure(slide_index=slide_index, command=action, phase=phase, error=error)
        self.failures.append(failure)
        message = failure.describe()
        logging.warning(f"PresentationManager: {message}")
        self.error_occurred.emit(message)
