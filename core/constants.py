# Shared constants for the Zoomdeck application

APP_NAME = "Zoomdeck"
ORGANIZATION_NAME = "Zoomdeck"

# View descriptors leave a 10% margin around the framed element unless told otherwise
DEFAULT_VIEW_SCALE = 1.1

DEFAULT_MOVE_DURATION_MS = 1000
DEFAULT_FADE_DURATION_MS = 500
DEFAULT_COLOR_DURATION_MS = 500
DEFAULT_VIEW_DELAY_MS = 250
DEFAULT_VIEW_SLOWDOWN = 2

# Fallbacks for style properties that are not set on a node
DEFAULT_OPACITY = 1.0
DEFAULT_FILL = "black"

# Sub-elements whose fill is changed by SetColorCommand
FILL_SELECTOR = "path"

# Name of the notification sent to the enclosing window when the logo overlay toggles
TOGGLE_LOGO_EVENT = "toggle-logo"

# Attributes understood by SceneNode.animate()
ATTR_TRANSFORM = "transform"
ATTR_OPACITY = "opacity"
ATTR_FILL = "fill"
