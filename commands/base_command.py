from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from core.errors import PresentationError, PrecondNotArmed

if TYPE_CHECKING:
    from core.presentation_context import PresentationContext # Forward declaration
    from core.scene import Scene

class Command(ABC):
    """Abstract base class for reversible slide commands.

    Commands are built unattached by the authoring factories; the
    PresentationManager attaches them to its context while wiring.
    """
    # Whether execute() refreshes the undo snapshot every time or only when unarmed
    RECAPTURE_ON_EXECUTE = False

    def __init__(self):
        self.context: Optional['PresentationContext'] = None

    def attach(self, context: 'PresentationContext'):
        self.context = context

    @property
    def scene(self) -> 'Scene':
        if self.context is None:
            raise PresentationError(f"{self.__class__.__name__} is not attached to a presentation")
        return self.context.scene

    @property
    def is_armed(self) -> bool:
        """True once execute() has captured what undo() needs."""
        return False

    def _require_armed(self):
        if not self.is_armed:
            raise PrecondNotArmed(self.__class__.__name__)

    @abstractmethod
    def execute(self):
        """Performs the action."""
        pass

    @abstractmethod
    def undo(self):
        """Reverts the action."""
        pass
