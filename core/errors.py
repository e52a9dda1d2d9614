"""Exceptions raised by presentation commands, geometry helpers and script loading."""


class PresentationError(Exception):
    """Base class for every error the presentation core raises on purpose."""


class ElementNotFound(PresentationError):
    """No node in the scene carries the requested id."""

    def __init__(self, element_id: str):
        super().__init__(f"No element with id '{element_id}' in the scene")
        self.element_id = element_id


class PrecondNotArmed(PresentationError):
    """undo() was called on a command that was never executed."""

    def __init__(self, command_name: str):
        super().__init__(f"{command_name}.undo() called before execute()")
        self.command_name = command_name


class GeometryDegenerate(PresentationError):
    """A bounding box has no area, so no viewport can be fitted around it."""


class PresentationScriptError(PresentationError):
    """A presentation script could not be loaded or does not define its slides."""
