from dataclasses import dataclass
from typing import Optional

from core.overlay_notifier import OverlayNotifier
from core.scene import Scene
from data_models.presentation_state import SequencerState


@dataclass
class PresentationContext:
    """Everything a command needs to act on the running presentation."""
    scene: Scene
    state: SequencerState
    notifier: Optional[OverlayNotifier] = None
