"""In-memory SVG document the presentation animates.

The document is kept as an ElementTree; commands change transforms and
styles on the tree and the scene re-renders it. Style reads and writes go
through the inline ``style`` attribute, which wins over presentation
attributes the same way it does in a browser.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional, Union

from core.geometry import Matrix, Rect, parse_transform_list

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)


def local_name(element: ET.Element) -> str:
    tag = element.tag
    if isinstance(tag, str) and tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def parse_style(text: Optional[str]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    if not text:
        return result
    for declaration in text.split(";"):
        if ":" not in declaration:
            continue
        name, value = declaration.split(":", 1)
        name, value = name.strip(), value.strip()
        if name:
            result[name] = value
    return result


def format_style(style: Dict[str, str]) -> str:
    return ";".join(f"{name}:{value}" for name, value in style.items())


def _parse_length(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    value = value.strip()
    for unit in ("px", "pt", "mm", "cm", "in"):
        if value.endswith(unit):
            value = value[:-len(unit)]
            break
    try:
        return float(value)
    except ValueError:
        return None


class SvgDocument:
    """Element lookup, style and transform access on a parsed SVG file."""

    def __init__(self, tree: ET.ElementTree):
        self.tree = tree
        self.root = tree.getroot()
        if local_name(self.root) != "svg":
            raise ValueError(f"Root element is <{local_name(self.root)}>, expected <svg>")
        self._parents: Dict[ET.Element, ET.Element] = {}
        self._by_id: Dict[str, ET.Element] = {}
        for parent in self.root.iter():
            for child in parent:
                self._parents[child] = parent
        for element in self.root.iter():
            element_id = element.get("id")
            if element_id and element_id not in self._by_id:
                self._by_id[element_id] = element
        # Incremented on every change so renderers know when to reload
        self.revision = 0

    @classmethod
    def from_file(cls, filepath: str) -> 'SvgDocument':
        logging.info(f"SvgDocument: parsing {filepath}")
        return cls(ET.parse(filepath))

    @classmethod
    def from_string(cls, text: Union[str, bytes]) -> 'SvgDocument':
        return cls(ET.ElementTree(ET.fromstring(text)))

    def find(self, element_id: str) -> Optional[ET.Element]:
        return self._by_id.get(element_id)

    def ids(self) -> List[str]:
        return list(self._by_id)

    def parent_of(self, element: ET.Element) -> Optional[ET.Element]:
        return self._parents.get(element)

    def descendants(self, element: ET.Element, tag: str) -> Iterator[ET.Element]:
        for candidate in element.iter():
            if candidate is not element and local_name(candidate) == tag:
                yield candidate

    def view_box(self) -> Rect:
        """The user-space rectangle the document shows, from viewBox or width/height."""
        raw = self.root.get("viewBox")
        if raw:
            parts = [float(v) for v in raw.replace(",", " ").split()]
            if len(parts) == 4:
                return Rect(*parts)
        width = _parse_length(self.root.get("width")) or 0.0
        height = _parse_length(self.root.get("height")) or 0.0
        return Rect(0.0, 0.0, width, height)

    def get_style(self, element: ET.Element, name: str) -> Optional[str]:
        value = parse_style(element.get("style")).get(name)
        if value is None:
            value = element.get(name)
        return value if value else None

    def set_style(self, element: ET.Element, name: str, value: str):
        style = parse_style(element.get("style"))
        style[name] = value
        element.set("style", format_style(style))
        self.revision += 1

    def transform_list(self, element: ET.Element) -> List[Matrix]:
        return parse_transform_list(element.get("transform"))

    def set_transform(self, element: ET.Element, matrix: Matrix):
        element.set("transform", matrix.to_svg())
        self.revision += 1

    def to_bytes(self) -> bytes:
        return ET.tostring(self.root, encoding="utf-8")
