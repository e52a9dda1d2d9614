import logging
import xml.etree.ElementTree as ET
from abc import ABCMeta
from typing import Any, Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import QByteArray, QEasingCurve, QObject, QRectF, QSequentialAnimationGroup, QTimer, QVariantAnimation
from PySide6.QtGui import QColor, QTransform
from PySide6.QtSvg import QSvgRenderer
from PySide6.QtSvgWidgets import QGraphicsSvgItem

from core.constants import ATTR_FILL, ATTR_OPACITY, ATTR_TRANSFORM, DEFAULT_FILL
from core.errors import ElementNotFound, PresentationError
from core.geometry import (
    Matrix, Rect, ViewportTriple, compose, cumulative_transform, format_number, interpolate_zoom,
    viewport_transform,
)
from core.scene import Scene, SceneNode, parse_opacity
from rendering.svg_document import SvgDocument

# Define a combined metaclass for QObject compatibility with ABC
class QObjectABCMeta(type(QObject), ABCMeta):
    pass


def to_qtransform(matrix: Matrix) -> QTransform:
    return QTransform(matrix.a, matrix.b, matrix.c, matrix.d, matrix.e, matrix.f)


def from_qtransform(transform: QTransform) -> Matrix:
    return Matrix(transform.m11(), transform.m12(), transform.m21(), transform.m22(), transform.dx(), transform.dy())


def _rect_from_qrectf(rect: QRectF) -> Rect:
    return Rect(rect.x(), rect.y(), rect.width(), rect.height())


def _map_rect(matrix: Matrix, rect: Rect) -> Rect:
    corners = [matrix.apply(x, y) for x in (rect.x, rect.x + rect.width) for y in (rect.y, rect.y + rect.height)]
    xs = [c[0] for c in corners]
    ys = [c[1] for c in corners]
    return Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def _lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


class SvgNode(SceneNode):
    """SceneNode backed by one element of the scene's SvgDocument."""

    def __init__(self, scene: 'SvgScene', element: ET.Element):
        self._scene = scene
        self.element = element

    @property
    def node_id(self) -> Optional[str]:
        return self.element.get("id")

    def _require_id(self) -> str:
        node_id = self.node_id
        if not node_id:
            raise PresentationError(f"Geometry of <{self.element.tag}> needs an id")
        return node_id

    def bounding_box(self) -> Rect:
        return self._scene.local_bounds(self._require_id(), self.element)

    def bounding_client_rect(self) -> Rect:
        return self._scene.client_bounds(self._require_id(), self.element)

    def transform_list(self) -> List[Matrix]:
        return self._scene.document.transform_list(self.element)

    def parent(self) -> Optional['SvgNode']:
        parent = self._scene.document.parent_of(self.element)
        return SvgNode(self._scene, parent) if parent is not None else None

    def animate(self, attribute: str, value: Any, duration: float, delay: float = 0) -> None:
        self._scene.animate_element(self.element, attribute, value, duration, delay)

    def get_style(self, name: str) -> Optional[str]:
        return self._scene.document.get_style(self.element, name)

    def children_matching(self, selector: str) -> List['SvgNode']:
        return [SvgNode(self._scene, child) for child in self._scene.document.descendants(self.element, selector)]

    def __eq__(self, other):
        return isinstance(other, SvgNode) and other.element is self.element

    def __hash__(self):
        return id(self.element)

    def __repr__(self):
        return f"SvgNode(<{self.element.tag}> id={self.node_id!r})"


class SvgScene(QObject, Scene, metaclass=QObjectABCMeta):
    """
    Renders an SvgDocument through QSvgRenderer into a QGraphicsSvgItem and
    animates it. Element changes are written to the document and the renderer
    is reloaded at most once per event loop turn.

    Coordinates: the document's viewBox is mapped onto the renderer's default
    size; that mapped space is the "client" space of bounding_client_rect()
    and viewport_rect(). The pan/zoom is applied as the item transform.
    """

    def __init__(self, document: SvgDocument, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.document = document
        self.renderer = QSvgRenderer(self)
        self.item = QGraphicsSvgItem()
        self._loaded_revision = -1
        self._refresh_pending = False
        # One running transition per (element, attribute); a new one replaces the old
        self._transitions: Dict[Tuple[Any, str], QSequentialAnimationGroup] = {}
        self._ensure_loaded()
        self.item.setSharedRenderer(self.renderer)

        size = self.renderer.defaultSize()
        self._client_rect = Rect(0.0, 0.0, float(size.width()), float(size.height()))
        view_box = document.view_box()
        if view_box.width > 0 and view_box.height > 0:
            self._document_to_client = compose(
                Matrix.scale(self._client_rect.width / view_box.width, self._client_rect.height / view_box.height),
                Matrix.translate(-view_box.x, -view_box.y),
            )
        else:
            self._document_to_client = Matrix.identity()

    @classmethod
    def from_file(cls, filepath: str, parent: Optional[QObject] = None) -> 'SvgScene':
        return cls(SvgDocument.from_file(filepath), parent)

    # --- Scene interface ---

    def select_by_id(self, element_id: str) -> SvgNode:
        element = self.document.find(element_id)
        if element is None:
            raise ElementNotFound(element_id)
        return SvgNode(self, element)

    def viewport_rect(self) -> Rect:
        return self._client_rect

    def animate_viewport(self, start: ViewportTriple, end: ViewportTriple, delay: float, slowdown: float) -> None:
        interpolator = interpolate_zoom(start, end)
        self.item.setTransform(to_qtransform(viewport_transform(start, self._client_rect)))
        duration = interpolator.duration * slowdown
        logging.debug(f"SvgScene: zoom {tuple(start)} -> {tuple(end)} over {duration:.0f}ms after {delay}ms")

        def step(t: float):
            self.item.setTransform(to_qtransform(viewport_transform(interpolator(t), self._client_rect)))

        self._start_transition((self, "viewport"), delay, duration, step, QEasingCurve.Type.InOutCubic)

    # --- geometry ---

    def local_bounds(self, element_id: str, element: ET.Element) -> Rect:
        """Bounds of the element in its own user space, before its own transform."""
        if element is self.document.root:
            return self.document.view_box()
        self._ensure_loaded()
        bounds = _rect_from_qrectf(self.renderer.boundsOnElement(element_id))
        own = cumulative_transform(SvgNode(self, element))
        if own.is_identity():
            return bounds
        inverse, invertible = to_qtransform(own).inverted()
        if not invertible:
            return bounds
        return _map_rect(from_qtransform(inverse), bounds)

    def client_bounds(self, element_id: str, element: ET.Element) -> Rect:
        """Bounds of the element in client space with every transform applied."""
        if element is self.document.root:
            # The renderer keeps no bounds for the document itself
            return self._client_rect
        self._ensure_loaded()
        parents = from_qtransform(self.renderer.transformForElement(element_id))
        bounds = _rect_from_qrectf(self.renderer.boundsOnElement(element_id))
        return _map_rect(compose(self._document_to_client, parents), bounds)

    # --- animation ---

    def animate_element(self, element: ET.Element, attribute: str, value: Any, duration: float, delay: float = 0):
        if attribute == ATTR_TRANSFORM:
            step = self._transform_step(element, value)
        elif attribute == ATTR_OPACITY:
            step = self._opacity_step(element, float(value))
        elif attribute == ATTR_FILL:
            step = self._fill_step(element, str(value))
        else:
            raise ValueError(f"Cannot animate attribute '{attribute}'")
        self._start_transition((element, attribute), delay, duration, step, QEasingCurve.Type.InOutCubic)

    def _transform_step(self, element: ET.Element, target: Matrix) -> Callable[[float], None]:
        start: List[Matrix] = []

        def step(t: float):
            if not start: # Read the starting value when the transition actually begins
                start.append(cumulative_transform(SvgNode(self, element)))
            if t >= 1.0:
                matrix = target
            else:
                s = start[0]
                matrix = Matrix(*(_lerp(a, b, t) for a, b in zip(
                    (s.a, s.b, s.c, s.d, s.e, s.f),
                    (target.a, target.b, target.c, target.d, target.e, target.f))))
            self.document.set_transform(element, matrix)
            self._schedule_refresh()
        return step

    def _opacity_step(self, element: ET.Element, target: float) -> Callable[[float], None]:
        start: List[float] = []

        def step(t: float):
            if not start:
                start.append(parse_opacity(self.document.get_style(element, ATTR_OPACITY)))
            value = target if t >= 1.0 else _lerp(start[0], target, t)
            self.document.set_style(element, ATTR_OPACITY, format_number(value))
            self._schedule_refresh()
        return step

    def _fill_step(self, element: ET.Element, target: str) -> Callable[[float], None]:
        start: List[QColor] = []
        end_color = QColor(target)

        def step(t: float):
            if not start:
                start.append(QColor(self.document.get_style(element, ATTR_FILL) or DEFAULT_FILL))
            if t >= 1.0 or not (start[0].isValid() and end_color.isValid()):
                value = target if t >= 1.0 else start[0].name()
            else:
                s = start[0]
                value = QColor.fromRgbF(
                    _lerp(s.redF(), end_color.redF(), t), _lerp(s.greenF(), end_color.greenF(), t),
                    _lerp(s.blueF(), end_color.blueF(), t), _lerp(s.alphaF(), end_color.alphaF(), t),
                ).name()
            self.document.set_style(element, ATTR_FILL, value)
            self._schedule_refresh()
        return step

    def _start_transition(self, key, delay: float, duration: float, step: Callable[[float], None],
                          easing: QEasingCurve.Type):
        previous = self._transitions.pop(key, None)
        if previous is not None:
            previous.stop()
            previous.deleteLater()

        if delay <= 0 and duration <= 0:
            step(1.0)
            return

        group = QSequentialAnimationGroup(self)
        if delay > 0:
            group.addPause(int(delay))
        animation = QVariantAnimation()
        animation.setStartValue(0.0)
        animation.setEndValue(1.0)
        animation.setDuration(max(int(duration), 0))
        animation.setEasingCurve(QEasingCurve(easing))
        animation.valueChanged.connect(lambda value: step(float(value)))
        group.addAnimation(animation)

        def finished():
            step(1.0)
            if self._transitions.get(key) is group:
                del self._transitions[key]
            group.deleteLater()

        group.finished.connect(finished)
        self._transitions[key] = group
        group.start()

    def running_transitions(self) -> int:
        return len(self._transitions)

    # --- rendering ---

    def _schedule_refresh(self):
        if not self._refresh_pending:
            self._refresh_pending = True
            QTimer.singleShot(0, self._ensure_loaded)

    def _ensure_loaded(self):
        self._refresh_pending = False
        if self._loaded_revision == self.document.revision:
            return
        if not self.renderer.load(QByteArray(self.document.to_bytes())):
            logging.error("SvgScene: QSvgRenderer could not load the document")
        self._loaded_revision = self.document.revision
        self.item.update()
