import logging
import os
from typing import Optional

from PySide6.QtCore import QObject, QRectF, Qt, Slot
from PySide6.QtGui import QColor, QFont, QPainter, QPixmap
from PySide6.QtWidgets import QFrame, QGraphicsScene, QGraphicsView, QLabel, QVBoxLayout, QWidget

from core.constants import APP_NAME
from core.overlay_notifier import OverlayNotifier
from rendering.svg_scene import SvgScene

LOGO_MARGIN = 24
LOGO_MAX_HEIGHT = 96


class PresentationWindow(QWidget):
    """
    Shows an SvgScene, typically fullscreen on the presentation screen,
    with a logo overlay that the presentation can toggle.
    """
    def __init__(self, svg_scene: SvgScene, notifier: Optional[OverlayNotifier] = None,
                 logo_path: Optional[str] = None, title: str = APP_NAME, parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.svg_scene = svg_scene

        viewport = svg_scene.viewport_rect()
        self.graphics_scene = QGraphicsScene(self)
        self.graphics_scene.addItem(svg_scene.item)
        # The visible area never follows the item; pan and zoom move the item instead
        self.graphics_scene.setSceneRect(QRectF(viewport.x, viewport.y, viewport.width, viewport.height))

        self.view = QGraphicsView(self.graphics_scene, self)
        self.view.setFrameShape(QFrame.Shape.NoFrame)
        self.view.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.view.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.view.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.view.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.view.setBackgroundBrush(QColor("white"))
        self.view.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.view)

        self.logo_label = self._create_logo_label(logo_path)
        self.logo_label.hide()

        if notifier is not None:
            notifier.toggled.connect(self.toggle_logo)

    def _create_logo_label(self, logo_path: Optional[str]) -> QLabel:
        label = QLabel(self)
        label.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        pixmap = QPixmap(logo_path) if logo_path and os.path.exists(logo_path) else QPixmap()
        if not pixmap.isNull():
            label.setPixmap(pixmap.scaledToHeight(min(pixmap.height(), LOGO_MAX_HEIGHT),
                                                  Qt.TransformationMode.SmoothTransformation))
        else:
            if logo_path:
                logging.warning(f"PresentationWindow: logo not found at {logo_path}, showing the app name")
            label.setText(APP_NAME)
            label.setFont(QFont("Arial", 28, QFont.Weight.Bold))
            label.setStyleSheet("color: #404040;")
        label.adjustSize()
        return label

    def install_input_adapter(self, adapter: QObject):
        """Routes keys and clicks on the presentation to the adapter."""
        self.view.installEventFilter(adapter)
        self.view.viewport().installEventFilter(adapter)
        self.installEventFilter(adapter)

    @Slot()
    def toggle_logo(self):
        self.logo_label.setVisible(self.logo_label.isHidden())
        self._place_logo()
        logging.debug(f"PresentationWindow: logo overlay {'hidden' if self.logo_label.isHidden() else 'shown'}")

    def _place_logo(self):
        self.logo_label.move(self.width() - self.logo_label.width() - LOGO_MARGIN,
                             self.height() - self.logo_label.height() - LOGO_MARGIN)
        self.logo_label.raise_()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.view.fitInView(self.graphics_scene.sceneRect(), Qt.AspectRatioMode.KeepAspectRatio)
        self._place_logo()

    def showEvent(self, event):
        super().showEvent(event)
        self.view.fitInView(self.graphics_scene.sceneRect(), Qt.AspectRatioMode.KeepAspectRatio)
        self.view.setFocus()
