"""Affine transform and viewport geometry used by the presentation commands.

Matrices follow the SVG convention: ``Matrix(a, b, c, d, e, f)`` maps a point
``(x, y)`` to ``(a*x + c*y + e, b*x + d*y + f)``. ``compose(m1, m2)`` returns
the matrix that applies ``m2`` first and ``m1`` second, which is the order in
which the entries of an SVG ``transform`` list are applied to a node.

Viewport positions are ``ViewportTriple(center_x, center_y, width)``: the
point of the document shown in the middle of the window and the width of the
document region that is visible.
"""

import math
import re
from dataclasses import dataclass
from functools import reduce
from typing import TYPE_CHECKING, Iterable, List, NamedTuple, Tuple

import numpy as np

from core.errors import GeometryDegenerate

if TYPE_CHECKING:
    from core.scene import SceneNode


@dataclass(frozen=True)
class Matrix:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> 'Matrix':
        return cls()

    @classmethod
    def translate(cls, tx: float, ty: float = 0.0) -> 'Matrix':
        return cls(1.0, 0.0, 0.0, 1.0, float(tx), float(ty))

    @classmethod
    def scale(cls, sx: float, sy: float = None) -> 'Matrix':
        if sy is None:
            sy = sx
        return cls(float(sx), 0.0, 0.0, float(sy), 0.0, 0.0)

    @classmethod
    def rotate(cls, degrees: float, cx: float = 0.0, cy: float = 0.0) -> 'Matrix':
        rad = math.radians(degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        rotation = cls(cos, sin, -sin, cos, 0.0, 0.0)
        if cx or cy:
            return compose(cls.translate(cx, cy), rotation, cls.translate(-cx, -cy))
        return rotation

    @classmethod
    def skew_x(cls, degrees: float) -> 'Matrix':
        return cls(1.0, 0.0, math.tan(math.radians(degrees)), 1.0, 0.0, 0.0)

    @classmethod
    def skew_y(cls, degrees: float) -> 'Matrix':
        return cls(1.0, math.tan(math.radians(degrees)), 0.0, 1.0, 0.0, 0.0)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Matrix':
        return cls(float(array[0, 0]), float(array[1, 0]), float(array[0, 1]),
                   float(array[1, 1]), float(array[0, 2]), float(array[1, 2]))

    def to_array(self) -> np.ndarray:
        return np.array([
            [self.a, self.c, self.e],
            [self.b, self.d, self.f],
            [0.0, 0.0, 1.0],
        ], dtype=float)

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def to_svg(self) -> str:
        return "matrix({})".format(",".join(format_number(v) for v in
                                            (self.a, self.b, self.c, self.d, self.e, self.f)))

    def is_identity(self) -> bool:
        return self == Matrix()


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


class ViewportTriple(NamedTuple):
    center_x: float
    center_y: float
    width: float


def format_number(value: float) -> str:
    # repr keeps every bit of the float so parsing to_svg() output round-trips exactly
    if value == int(value) and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def compose(*matrices: Matrix) -> Matrix:
    """Multiplies matrices left to right; the rightmost one is applied first."""
    if not matrices:
        return Matrix.identity()
    product = reduce(np.matmul, (m.to_array() for m in matrices))
    return Matrix.from_array(product)


_TRANSFORM_RE = re.compile(r"\s*(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)\s*,?")
_NUMBER_SPLIT_RE = re.compile(r"[\s,]+")


def parse_transform_list(text: str) -> List[Matrix]:
    """Parses the value of an SVG ``transform`` attribute into its list of matrices."""
    if text is None or not text.strip():
        return []

    result: List[Matrix] = []
    pos = 0
    while pos < len(text):
        match = _TRANSFORM_RE.match(text, pos)
        if not match:
            if text[pos:].strip():
                raise ValueError(f"Malformed transform list: '{text}'")
            break
        name, raw_args = match.group(1), match.group(2).strip()
        try:
            args = [float(v) for v in _NUMBER_SPLIT_RE.split(raw_args) if v]
        except ValueError:
            raise ValueError(f"Malformed arguments in transform '{match.group(0).strip()}'")
        result.append(_transform_from_args(name, args))
        pos = match.end()
    return result


def _transform_from_args(name: str, args: List[float]) -> Matrix:
    count = len(args)
    if name == "matrix" and count == 6:
        return Matrix(*args)
    if name == "translate" and count in (1, 2):
        return Matrix.translate(*args)
    if name == "scale" and count in (1, 2):
        return Matrix.scale(*args)
    if name == "rotate" and count in (1, 3):
        return Matrix.rotate(*args)
    if name == "skewX" and count == 1:
        return Matrix.skew_x(args[0])
    if name == "skewY" and count == 1:
        return Matrix.skew_y(args[0])
    raise ValueError(f"Transform '{name}' does not accept {count} argument(s)")


def cumulative_transform(node: 'SceneNode') -> Matrix:
    """Identity composed with every entry of the node's own transform list."""
    return compose(Matrix.identity(), *node.transform_list())


def ancestor_transform(node: 'SceneNode') -> Matrix:
    """Transform lists of every ancestor of the node, root first."""
    chain = []
    current = node.parent()
    while current is not None:
        chain.append(current)
        current = current.parent()
    matrices: List[Matrix] = []
    for item in reversed(chain):
        matrices.extend(item.transform_list())
    return compose(Matrix.identity(), *matrices)


def absolute_transform(node: 'SceneNode') -> Matrix:
    """The node's transform list preceded by those of all its ancestors, root first."""
    return compose(ancestor_transform(node), *node.transform_list())


def absolute_position(node: 'SceneNode') -> Tuple[float, float]:
    """Position of the node's local bounding box origin after every transform above it."""
    bbox = node.bounding_box()
    return absolute_transform(node).apply(bbox.x, bbox.y)


def fit_viewport(bounding_rect: Rect, fit_scale: float, viewport_rect: Rect) -> ViewportTriple:
    """Returns the viewport that shows ``bounding_rect`` enlarged by ``fit_scale``.

    The more constraining axis decides the zoom factor.
    """
    if fit_scale <= 0:
        raise ValueError(f"fit_scale must be positive, got {fit_scale}")
    if not (bounding_rect.width > 0 and bounding_rect.height > 0):
        raise GeometryDegenerate(
            f"Cannot fit a viewport around a {bounding_rect.width}x{bounding_rect.height} rectangle")
    scale_factor = min(
        viewport_rect.width / (bounding_rect.width * fit_scale),
        viewport_rect.height / (bounding_rect.height * fit_scale),
    )
    if not (math.isfinite(scale_factor) and scale_factor > 0):
        raise GeometryDegenerate(f"Viewport {viewport_rect} gives no usable zoom factor")
    return ViewportTriple(bounding_rect.center_x, bounding_rect.center_y, viewport_rect.width / scale_factor)


def initial_viewport(viewport_rect: Rect) -> ViewportTriple:
    return ViewportTriple(viewport_rect.center_x, viewport_rect.center_y, viewport_rect.width)


def viewport_transform(pos: Iterable[float], viewport_rect: Rect) -> Matrix:
    """Transform that brings the viewport triple ``pos`` to the centre of the window.

    The zoom is taken about the centre of ``viewport_rect``.
    """
    center_x, center_y, width = pos
    if width <= 0:
        raise GeometryDegenerate(f"Viewport width must be positive, got {width}")
    k = viewport_rect.width / width
    origin_x, origin_y = viewport_rect.center_x, viewport_rect.center_y
    return compose(
        Matrix.translate(origin_x, origin_y),
        Matrix.translate((origin_x - center_x) * k, (origin_y - center_y) * k),
        Matrix.scale(k),
        Matrix.translate(-origin_x, -origin_y),
    )


_RHO = math.sqrt(2)
_RHO2 = 2.0
_RHO4 = 4.0
_EPSILON2 = 1e-12


class ZoomInterpolator:
    """Smooth pan-and-zoom path between two viewport triples (van Wijk and Nuij).

    Calling the interpolator with ``t`` in ``[0, 1]`` returns the viewport at
    that point of the path. ``duration`` is the recommended transition time in
    milliseconds for a path of this length.
    """

    def __init__(self, start: Iterable[float], end: Iterable[float]):
        self.start = ViewportTriple(*start)
        self.end = ViewportTriple(*end)
        ux0, uy0, w0 = self.start
        ux1, uy1, w1 = self.end
        if w0 <= 0 or w1 <= 0:
            raise GeometryDegenerate(f"Cannot interpolate between widths {w0} and {w1}")

        self._dx = ux1 - ux0
        self._dy = uy1 - uy0
        d2 = self._dx * self._dx + self._dy * self._dy

        if d2 < _EPSILON2:
            # Pure zoom around (almost) the same centre
            self._pure_zoom = True
            self._s = math.log(w1 / w0) / _RHO
        else:
            self._pure_zoom = False
            d1 = math.sqrt(d2)
            b0 = (w1 * w1 - w0 * w0 + _RHO4 * d2) / (2 * w0 * _RHO2 * d1)
            b1 = (w1 * w1 - w0 * w0 - _RHO4 * d2) / (2 * w1 * _RHO2 * d1)
            self._r0 = math.log(math.sqrt(b0 * b0 + 1) - b0)
            r1 = math.log(math.sqrt(b1 * b1 + 1) - b1)
            self._d1 = d1
            self._s = (r1 - self._r0) / _RHO

        self.duration = abs(self._s) * 1000 * _RHO / math.sqrt(2)

    def __call__(self, t: float) -> ViewportTriple:
        if t <= 0:
            return self.start
        if t >= 1:
            return self.end
        ux0, uy0, w0 = self.start
        s = t * self._s
        if self._pure_zoom:
            return ViewportTriple(ux0 + t * self._dx, uy0 + t * self._dy, w0 * math.exp(_RHO * s))
        cosh_r0 = math.cosh(self._r0)
        u = w0 / (_RHO2 * self._d1) * (cosh_r0 * math.tanh(_RHO * s + self._r0) - math.sinh(self._r0))
        return ViewportTriple(ux0 + u * self._dx, uy0 + u * self._dy, w0 * cosh_r0 / math.cosh(_RHO * s + self._r0))


def interpolate_zoom(start: Iterable[float], end: Iterable[float]) -> ZoomInterpolator:
    return ZoomInterpolator(start, end)
