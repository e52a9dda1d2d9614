import logging
from typing import Optional

from PySide6.QtCore import QEvent, QObject, Qt

from core.overlay_notifier import OverlayNotifier
from core.presentation_manager import PresentationManager

ADVANCE = "advance"
RETREAT = "retreat"
TOGGLE_OVERLAY = "toggle-overlay"

KEY_SIGNALS = {
    Qt.Key.Key_Left: RETREAT,
    Qt.Key.Key_Down: RETREAT,
    Qt.Key.Key_Right: ADVANCE,
    Qt.Key.Key_Up: ADVANCE,
    Qt.Key.Key_Space: ADVANCE,
    Qt.Key.Key_Return: TOGGLE_OVERLAY,
    Qt.Key.Key_Enter: TOGGLE_OVERLAY,
}


class InputAdapter(QObject):
    """
    Event filter turning clicks and key releases into presentation navigation.
    Install it on the widget showing the presentation.
    """

    def __init__(self, manager: PresentationManager, notifier: Optional[OverlayNotifier] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.manager = manager
        self.notifier = notifier

    def dispatch(self, signal: str) -> bool:
        if signal == ADVANCE:
            self.manager.advance()
        elif signal == RETREAT:
            self.manager.retreat()
        elif signal == TOGGLE_OVERLAY:
            if self.notifier is not None:
                self.notifier.toggle()
        else:
            return False
        return True

    def handle_key(self, key) -> bool:
        try:
            key = Qt.Key(key) # QKeyEvent.key() hands out plain ints
        except ValueError:
            return False
        signal = KEY_SIGNALS.get(key)
        if signal is None:
            return False
        logging.debug(f"InputAdapter: key {key} -> {signal}")
        return self.dispatch(signal)

    def handle_mouse_button(self, button) -> bool:
        if button != Qt.MouseButton.LeftButton:
            return False
        return self.dispatch(ADVANCE)

    def eventFilter(self, watched_object, event):
        event_type = event.type()
        if event_type == QEvent.Type.KeyRelease:
            if event.isAutoRepeat():
                return True
            if self.handle_key(event.key()):
                return True
        elif event_type == QEvent.Type.MouseButtonPress:
            if self.handle_mouse_button(event.button()):
                return True
        return super().eventFilter(watched_object, event)
