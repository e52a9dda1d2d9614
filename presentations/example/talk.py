from commands.factories import (
    align_vertically, change_view, fade_in, fade_out, invert, move, set_color, toggle_logo, view,
)

TITLE = "Example talk"
SCENE = "talk.svg"

title = view("title").set_scale(1.2)
overview = view("overview")
detail = view("detail").set_scale(1.3)
everything = view("svg")

# Shown on one slide and hidden again later through invert()
shapes_in = fade_in(["detail-shapes"])

SLIDES = [
    [fade_out(["detail-shapes", "marker"], duration=0)],
    [change_view(title, delay=0, slowdown=0)],
    [change_view(everything)],
    [change_view(detail), shapes_in],
    [set_color(["detail-shapes"], "#ffa000")],
    [fade_in(["marker"]), align_vertically("anchor", "marker")],
    [move("marker", "anchor")],
    [invert(shapes_in)],
    [change_view(overview), toggle_logo()],
]
