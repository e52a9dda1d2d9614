import logging

from PySide6.QtCore import QObject, Signal

from core.constants import TOGGLE_LOGO_EVENT


class OverlayNotifier(QObject):
    """
    Carries the logo overlay toggle out of the presentation core.
    The window hosting the presentation listens to `toggled` and shows or hides
    its overlay; the core never learns whether anyone is listening.
    """
    toggled = Signal()

    event_name = TOGGLE_LOGO_EVENT

    def toggle(self):
        logging.debug(f"OverlayNotifier: dispatching '{self.event_name}'")
        self.toggled.emit()
