"""Tests for the Timeline playback state machine."""

import logging

import pytest

from dsviz.core.timeline import PlaybackState, Timeline
from dsviz.core.types import AnimationInstruction, AnimationVerb


@pytest.fixture
def timeline(instructions):
    tl = Timeline()
    tl.create_timeline(instructions)
    yield tl
    tl.destroy()


class Recorder:
    """Collects every signal a timeline emits."""

    def __init__(self, timeline):
        self.progress = []
        self.started = []
        self.states = []
        self.finished = 0
        timeline.progressChanged.connect(lambda step, value: self.progress.append((step, value)))
        timeline.instructionStarted.connect(
            lambda instruction, handle: self.started.append(instruction.target_id)
        )
        timeline.stateChanged.connect(self.states.append)
        timeline.finished.connect(self._on_finished)

    def _on_finished(self):
        self.finished += 1


class TestUninitialized:
    def test_operations_warn_and_fail(self, caplog):
        tl = Timeline()

        with caplog.at_level(logging.WARNING, logger="dsviz.core.timeline"):
            assert tl.play() is False
            assert tl.step_forward() is False
            assert tl.go_to_step(0) is False

        assert "not initialized" in caplog.text
        assert tl.state is PlaybackState.UNINITIALIZED

    def test_progress_is_zero(self):
        tl = Timeline()

        assert tl.get_progress() == 0
        assert tl.total_steps == 0
        assert tl.current_step == 0


def test_create_resets_to_ready(timeline, instructions):
    timeline.go_to_step(2)

    assert timeline.create_timeline(instructions[:2]) is True

    assert timeline.state is PlaybackState.READY
    assert timeline.current_step == 0
    assert timeline.total_steps == 2


def test_play_announces_first_instruction(timeline):
    recorder = Recorder(timeline)

    assert timeline.play() is True

    assert timeline.state is PlaybackState.PLAYING
    assert recorder.started == ["array-0"]
    assert recorder.states == ["playing"]
    assert timeline.play() is False


def test_advance_moves_through_steps(timeline):
    recorder = Recorder(timeline)
    timeline.play()

    timeline.advance(60)
    assert timeline.current_step == 0
    timeline.advance(60)

    assert timeline.current_step == 1
    assert recorder.progress == [(1, pytest.approx(1 / 3))]
    assert recorder.started == ["array-0", "array-1"]


def test_playback_finishes_at_the_end(timeline):
    recorder = Recorder(timeline)
    timeline.play()

    timeline.advance(1000)

    assert timeline.state is PlaybackState.STOPPED
    assert timeline.current_step == 2
    assert recorder.finished == 1
    assert timeline.advance(16) is False


def test_play_after_finish_restarts(timeline):
    timeline.play()
    timeline.advance(1000)

    assert timeline.play() is True
    assert timeline.current_step == 0
    assert timeline.state is PlaybackState.PLAYING


def test_pause_freezes_the_clock(timeline):
    timeline.play()
    timeline.advance(50)

    assert timeline.pause() is True
    assert timeline.advance(500) is False
    assert timeline.current_step == 0
    assert timeline.pause() is False

    timeline.play()
    timeline.advance(50)
    assert timeline.current_step == 1


def test_stop_rewinds_to_ready(timeline):
    timeline.play()
    timeline.advance(150)

    assert timeline.stop() is True

    assert timeline.current_step == 0
    assert timeline.state is PlaybackState.READY


def test_step_forward_and_backward(timeline):
    assert timeline.step_backward() is False
    assert timeline.step_forward() is True
    assert timeline.step_forward() is True
    assert timeline.step_forward() is False
    assert timeline.current_step == 2
    assert timeline.step_backward() is True
    assert timeline.current_step == 1


def test_step_forward_wraps_only_when_looping(timeline):
    timeline.go_to_step(2)
    timeline.set_loop(True)

    assert timeline.step_forward() is True
    assert timeline.current_step == 0
    assert timeline.toggle_loop() is False


def test_go_to_step_is_deterministic(timeline):
    recorder = Recorder(timeline)

    assert timeline.go_to_step(2) is True
    assert timeline.go_to_step(2) is True

    assert timeline.current_step == 2
    assert recorder.progress == [(2, pytest.approx(2 / 3))] * 2


def test_go_to_step_rejects_out_of_range(timeline, caplog):
    timeline.go_to_step(1)

    with caplog.at_level(logging.WARNING, logger="dsviz.core.timeline"):
        assert timeline.go_to_step(3) is False
        assert timeline.go_to_step(-1) is False

    assert timeline.current_step == 1
    assert timeline.state is PlaybackState.READY
    assert "Invalid step" in caplog.text


def test_speed_is_clamped(timeline):
    assert timeline.set_speed(10) == 4.0
    assert timeline.set_speed(0) == 0.1
    assert timeline.set_speed(2) == 2.0
    assert timeline.scaled_duration(0) == 50


def test_speed_scales_playback(timeline):
    timeline.set_speed(2)
    timeline.play()

    timeline.advance(50)

    assert timeline.current_step == 1


def test_loop_restarts_from_the_first_step(timeline):
    recorder = Recorder(timeline)
    timeline.set_loop(True)
    timeline.play()

    timeline.advance(300)

    assert timeline.current_step == 0
    assert timeline.state is PlaybackState.PLAYING
    assert recorder.finished == 0


def test_step_progress_follows_easing():
    tl = Timeline()
    tl.create_timeline([AnimationInstruction(AnimationVerb.MOVE, "a", duration=100, easing="linear")])
    tl.play()

    tl.advance(25)

    assert tl.step_progress() == pytest.approx(0.25)


def test_missing_targets_are_skipped(instructions, caplog):
    def resolver(target_id):
        return None if target_id == "array-1" else {"id": target_id}

    tl = Timeline(resolver)
    recorder = Recorder(tl)
    with caplog.at_level(logging.WARNING, logger="dsviz.core.timeline"):
        tl.create_timeline(instructions)

    assert "array-1" in caplog.text
    assert tl.is_bound(0) and not tl.is_bound(1)
    assert tl.target_for(2) == {"id": "array-2"}

    tl.play()
    tl.advance(100)

    assert tl.current_step == 2
    assert recorder.started == ["array-0", "array-2"]


def test_empty_instruction_list_finishes_immediately():
    tl = Timeline()
    recorder = Recorder(tl)
    tl.create_timeline([])

    assert tl.play() is True

    assert tl.state is PlaybackState.STOPPED
    assert recorder.finished == 1
    assert tl.get_progress() == 0


def test_clear_returns_to_uninitialized(timeline):
    timeline.clear()

    assert timeline.state is PlaybackState.UNINITIALIZED
    assert timeline.total_steps == 0
    assert timeline.play() is False


def test_destroy_is_terminal(instructions, caplog):
    tl = Timeline()
    tl.create_timeline(instructions)
    recorder = Recorder(tl)

    tl.destroy()

    assert recorder.states == ["destroyed"]
    assert tl.state is PlaybackState.DESTROYED
    assert tl.total_steps == 0
    with caplog.at_level(logging.WARNING, logger="dsviz.core.timeline"):
        assert tl.create_timeline(instructions) is False
        assert tl.play() is False
    assert "destroyed" in caplog.text

    tl.destroy()
    assert recorder.states == ["destroyed"]
