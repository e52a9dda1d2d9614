# Loads presentation scripts from disk.
import logging
import os
import runpy
from dataclasses import dataclass, field
from typing import Any, Dict, List

from commands.base_command import Command
from core.errors import PresentationScriptError
from core.presentation_manager import Slide, flatten_slide

SLIDES_NAME = "SLIDES"
SCENE_NAME = "SCENE"
TITLE_NAME = "TITLE"


@dataclass
class PresentationScript:
    """A presentation script after it has been run."""
    path: str
    scene_path: str
    title: str
    slides: List[Slide] = field(default_factory=list)


class PresentationIO:
    """
    Runs presentation scripts. A script is a Python file that builds its slides
    with the helpers in commands.factories and defines:

        SCENE  - path of the SVG document, relative to the script
        SLIDES - list of slides, each a list of commands
        TITLE  - optional window title (defaults to the file name)

    Scripts are executed from scratch on every load; nothing is cached.
    """

    def load_script(self, filepath: str) -> PresentationScript:
        filepath = os.path.abspath(filepath)
        if not os.path.isfile(filepath):
            logging.error(f"PresentationIO: script not found at {filepath}")
            raise FileNotFoundError(filepath)

        try:
            namespace = runpy.run_path(filepath, run_name="__presentation__")
        except PresentationScriptError:
            raise
        except Exception as e:
            logging.error(f"PresentationIO: error while running {filepath}: {e}")
            raise PresentationScriptError(f"Error while running {filepath}: {e}") from e

        slides = self._read_slides(namespace, filepath)
        scene_path = self._resolve_scene_path(namespace, filepath)
        title = namespace.get(TITLE_NAME) or os.path.splitext(os.path.basename(filepath))[0]
        logging.info(f"PresentationIO: loaded '{title}' with {len(slides)} slides from {filepath}")
        return PresentationScript(path=filepath, scene_path=scene_path, title=str(title), slides=slides)

    def _read_slides(self, namespace: Dict[str, Any], filepath: str) -> List[Slide]:
        raw_slides = namespace.get(SLIDES_NAME)
        if not isinstance(raw_slides, (list, tuple)) or not raw_slides:
            raise PresentationScriptError(f"{filepath} must define {SLIDES_NAME} as a non-empty list of slides")
        slides = []
        for index, raw_slide in enumerate(raw_slides):
            if isinstance(raw_slide, Command):
                raw_slide = [raw_slide]
            if not isinstance(raw_slide, (list, tuple)):
                raise PresentationScriptError(f"{filepath}: slide {index} is not a list of commands")
            try:
                slides.append(flatten_slide(raw_slide))
            except TypeError as e:
                raise PresentationScriptError(f"{filepath}: slide {index}: {e}") from e
        return slides

    def _resolve_scene_path(self, namespace: Dict[str, Any], filepath: str) -> str:
        scene = namespace.get(SCENE_NAME)
        if not isinstance(scene, str) or not scene:
            raise PresentationScriptError(f"{filepath} must define {SCENE_NAME} as the path of an SVG file")
        if not os.path.isabs(scene):
            scene = os.path.join(os.path.dirname(filepath), scene)
        scene = os.path.abspath(scene)
        if not os.path.isfile(scene):
            raise PresentationScriptError(f"Scene file {scene} referenced by {filepath} does not exist")
        return scene
