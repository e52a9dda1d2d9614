from __future__ import annotations

import pytest

from commands.factories import change_view, fade_in, fade_out, invert, move, set_color, toggle_logo, view
from commands.slide_commands import FadeCommand, MoveCommand
from core.constants import DEFAULT_MOVE_DURATION_MS
from core.errors import ElementNotFound, GeometryDegenerate, PrecondNotArmed, PresentationError
from core.geometry import Matrix, ViewportTriple, absolute_position, initial_viewport
from core.presentation_context import PresentationContext
from core.scene import parse_opacity
from data_models.presentation_state import SequencerState


def attach(command, scene, notifier=None):
    state = SequencerState(viewport=initial_viewport(scene.viewport_rect()))
    command.attach(PresentationContext(scene=scene, state=state, notifier=notifier))
    return command


class TestMove:
    def test_execute_lines_element_up_with_targets(self, scene) -> None:
        cmd = attach(move("a", "b"), scene)
        cmd.execute()
        assert scene.nodes["a"].transforms == [Matrix.translate(200, 100)]
        assert absolute_position(scene.nodes["a"]) == absolute_position(scene.nodes["b"])

    def test_x_and_y_come_from_different_targets(self, scene) -> None:
        cmd = attach(move("a", "b", "c"), scene)
        cmd.execute()
        assert absolute_position(scene.nodes["a"]) == (200, 200)

    def test_existing_transform_is_kept_and_undone(self, scene) -> None:
        node = scene.add("shifted", 0, 0, 10, 10, transforms=[Matrix.translate(10, 0)])
        cmd = attach(MoveCommand("shifted", "b", "b"), scene)
        cmd.execute()
        assert absolute_position(node) == (200, 100)
        cmd.undo()
        assert node.transforms == [Matrix.translate(10, 0)]

    def test_back_is_captured_once(self, scene) -> None:
        cmd = attach(move("a", "b"), scene)
        cmd.execute()
        cmd.execute()
        assert cmd.back == Matrix.identity()
        assert scene.nodes["a"].transforms == [Matrix.translate(200, 100)]
        cmd.undo()
        assert scene.nodes["a"].transforms == [Matrix.identity()]

    def test_undo_uses_the_default_duration(self, scene) -> None:
        cmd = attach(move("a", "b", duration=50), scene)
        cmd.execute()
        cmd.undo()
        assert scene.calls[0][3] == 50
        assert scene.calls[-1][3] == DEFAULT_MOVE_DURATION_MS

    def test_undo_before_execute_raises(self, scene) -> None:
        cmd = attach(move("a", "b"), scene)
        with pytest.raises(PrecondNotArmed):
            cmd.undo()
        assert scene.calls == []

    def test_unknown_target_raises(self, scene) -> None:
        cmd = attach(move("a", "nope"), scene)
        with pytest.raises(ElementNotFound):
            cmd.execute()
        assert not cmd.is_armed

    def test_quarter_turn_cannot_be_moved(self, scene) -> None:
        scene.add("rot", 0, 0, 10, 10, transforms=[Matrix(0, 1, -1, 0, 0, 0)])
        cmd = attach(move("rot", "b"), scene)
        with pytest.raises(GeometryDegenerate):
            cmd.execute()
        assert not cmd.is_armed
        assert scene.calls == []


class TestFade:
    def test_missing_opacity_reads_as_one(self, scene) -> None:
        cmd = attach(fade_out(["a", "b"]), scene)
        cmd.execute()
        assert cmd.old_vals == {"a": 1.0, "b": 1.0}
        assert scene.nodes["a"].opacity() == 0.0
        cmd.undo()
        assert scene.nodes["a"].opacity() == 1.0
        assert scene.nodes["b"].opacity() == 1.0

    def test_snapshot_is_not_refreshed(self, scene) -> None:
        scene.nodes["a"].style["opacity"] = "0.25"
        cmd = attach(fade_in(["a"]), scene)
        cmd.execute()
        cmd.execute()
        cmd.undo()
        assert scene.nodes["a"].opacity() == 0.25

    def test_percentage_opacity_is_restored(self, scene) -> None:
        scene.nodes["a"].style["opacity"] = "50%"
        cmd = attach(fade_out(["a"]), scene)
        cmd.execute()
        assert cmd.old_vals == {"a": 0.5}
        cmd.undo()
        assert scene.nodes["a"].opacity() == 0.5

    def test_unreadable_opacity_leaves_the_fade_unarmed(self, scene) -> None:
        scene.nodes["a"].style["opacity"] = "half"
        cmd = attach(fade_out(["a"]), scene)
        with pytest.raises(PresentationError):
            cmd.execute()
        assert not cmd.is_armed
        assert scene.calls == []

    def test_duration_and_delay_reach_the_scene(self, scene) -> None:
        cmd = attach(fade_in(["a"], duration=0, delay=30), scene)
        cmd.execute()
        assert scene.calls == [("a", "opacity", 1.0, 0, 30)]

    def test_value_must_be_an_opacity(self) -> None:
        with pytest.raises(ValueError):
            FadeCommand(["a"], 1.5)

    def test_undo_before_execute_raises(self, scene) -> None:
        with pytest.raises(PrecondNotArmed):
            attach(fade_in(["a"]), scene).undo()


class TestSetColor:
    def test_recolors_paths_and_restores_them(self, scene) -> None:
        cmd = attach(set_color(["group"], "blue"), scene)
        cmd.execute()
        assert scene.nodes["p1"].get_style("fill") == "blue"
        assert scene.nodes["p2"].get_style("fill") == "blue"
        cmd.undo()
        assert scene.nodes["p1"].get_style("fill") == "red"
        assert scene.nodes["p2"].get_style("fill") == "black"

    def test_second_execute_refreshes_the_snapshot(self, scene) -> None:
        cmd = attach(set_color(["group"], "blue"), scene)
        cmd.execute()
        cmd.execute()
        cmd.undo()
        assert scene.nodes["p1"].get_style("fill") == "blue"

    def test_element_without_paths_is_a_no_op(self, scene) -> None:
        cmd = attach(set_color(["a"], "blue"), scene)
        cmd.execute()
        cmd.undo()
        assert scene.calls == []


class TestChangeView:
    def test_execute_and_undo_move_the_viewport(self, scene) -> None:
        cmd = attach(change_view(view("b").set_scale(1.0), delay=0, slowdown=1), scene)
        start = cmd.context.state.viewport
        cmd.old_pos = start
        assert cmd.compute_pos() == ViewportTriple(250, 125, 100)

        cmd.execute()
        assert cmd.context.state.viewport == ViewportTriple(250, 125, 100)
        assert scene.viewport_calls[-1] == (tuple(start), (250, 125, 100), 0, 1)

        cmd.undo()
        assert cmd.context.state.viewport == start
        assert scene.viewport == start

    def test_execute_without_wiring_raises(self, scene) -> None:
        cmd = attach(change_view(view("b")), scene)
        with pytest.raises(PresentationError, match="not wired") as info:
            cmd.execute()
        assert type(info.value) is PresentationError

    def test_undo_before_execute_raises(self, scene) -> None:
        cmd = attach(change_view(view("b")), scene)
        cmd.old_pos = cmd.context.state.viewport
        cmd.compute_pos()
        with pytest.raises(PrecondNotArmed):
            cmd.undo()


class TestToggleLogo:
    def test_execute_and_undo_both_toggle(self, scene, qapp) -> None:
        from core.overlay_notifier import OverlayNotifier

        notifier = OverlayNotifier()
        seen = []
        notifier.toggled.connect(lambda: seen.append(True))
        cmd = attach(toggle_logo(), scene, notifier)
        cmd.undo()
        cmd.execute()
        assert len(seen) == 2

    def test_without_notifier_nothing_happens(self, scene) -> None:
        attach(toggle_logo(), scene).execute()

    def test_unattached_raises(self) -> None:
        with pytest.raises(PresentationError):
            toggle_logo().execute()


class TestInvert:
    def test_swaps_execute_and_undo(self, scene) -> None:
        shown = fade_in(["a"])
        attach(shown, scene)
        scene.nodes["a"].style["opacity"] = "0"
        shown.execute()

        hidden = attach(invert(shown), scene)
        hidden.execute()
        assert scene.nodes["a"].opacity() == 0.0
        hidden.undo()
        assert scene.nodes["a"].opacity() == 1.0

    def test_attaches_the_wrapped_command(self, scene) -> None:
        inner = fade_in(["a"])
        outer = attach(invert(inner), scene)
        assert inner.context is outer.context

    def test_inverting_an_unexecuted_command_raises(self, scene) -> None:
        with pytest.raises(PrecondNotArmed):
            attach(invert(fade_in(["a"])), scene).execute()


def test_unattached_command_raises() -> None:
    with pytest.raises(PresentationError):
        fade_out(["a"]).execute()


def test_opacity_values_are_read_as_numbers_or_percentages() -> None:
    assert parse_opacity("0.25") == 0.25
    assert parse_opacity(" 50% ") == 0.5
    assert parse_opacity(None) == 1.0
    assert parse_opacity("", default=0.0) == 0.0
    with pytest.raises(PresentationError, match="half"):
        parse_opacity("half")
