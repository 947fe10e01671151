"""Tests for instruction generation and easing resolution."""

import logging

from PyQt5.QtCore import QEasingCurve

from dsviz.core.animation import (
    AnimationToolkit,
    generate_instructions,
    is_known_easing,
    resolve_easing,
)
from dsviz.core.types import AnimationVerb, Transition, TransitionKind

TRANSITIONS = [
    Transition(TransitionKind.DELETE, "array-4", from_={"index": 4, "value": 5}),
    Transition(TransitionKind.INSERT, "array-2", to={"index": 2, "value": 99}),
    Transition(TransitionKind.MOVE, "array-3", from_={"index": 2, "value": 3},
               to={"index": 3, "value": 3}),
    Transition(TransitionKind.UPDATE, "array-0", from_={"index": 0, "value": 1},
               to={"index": 0, "value": 7}),
]


def test_verbs_map_one_to_one():
    instructions = generate_instructions(TRANSITIONS)

    assert [i.verb for i in instructions] == [
        AnimationVerb.DELETE,
        AnimationVerb.INSERT,
        AnimationVerb.MOVE,
        AnimationVerb.UPDATE,
    ]
    assert [i.target_id for i in instructions] == ["array-4", "array-2", "array-3", "array-0"]


def test_defaults():
    (instruction,) = generate_instructions(TRANSITIONS[:1])

    assert instruction.duration == 300
    assert instruction.delay == 0
    assert instruction.easing == "easeInOut"
    assert instruction.from_ == {"index": 4, "value": 5}


def test_overrides_and_stagger():
    toolkit = AnimationToolkit(duration=120, easing="linear", delay=10, stagger=50)

    instructions = toolkit.generate(TRANSITIONS[:3], easing="bounce")

    assert [i.delay for i in instructions] == [10, 60, 110]
    assert {i.duration for i in instructions} == {120}
    assert {i.easing for i in instructions} == {"bounce"}
    assert instructions[2].total_duration == 230


def test_empty_transitions():
    assert generate_instructions([]) == []


def test_highlight_keeps_order():
    instructions = AnimationToolkit().highlight(["tree-node-0", "tree-node-2"], reason="search")

    assert [i.verb for i in instructions] == [AnimationVerb.HIGHLIGHT] * 2
    assert instructions[1].metadata == {"reason": "search", "order": 1}
    assert instructions[0].duration == 200


def test_instruction_to_dict():
    (instruction,) = generate_instructions(TRANSITIONS[1:2], duration=80)

    assert instruction.to_dict() == {
        "type": "INSERT",
        "targetId": "array-2",
        "duration": 80,
        "delay": 0,
        "easing": "easeInOut",
        "from": None,
        "to": {"index": 2, "value": 99},
        "metadata": {},
    }


def test_resolve_aliases_and_qt_names():
    assert resolve_easing("linear").type() == QEasingCurve.Linear
    assert resolve_easing("easeInOut").type() == QEasingCurve.InOutQuad
    assert resolve_easing("OutBack").type() == QEasingCurve.OutBack
    assert resolve_easing(None).type() == QEasingCurve.InOutQuad
    assert resolve_easing("linear").valueForProgress(0.5) == 0.5


def test_unknown_easing_falls_back_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="dsviz.core.animation"):
        curve = resolve_easing("wobbly")

    assert curve.type() == QEasingCurve.InOutQuad
    assert "wobbly" in caplog.text


def test_is_known_easing():
    assert is_known_easing("bounce")
    assert is_known_easing("InOutSine")
    assert not is_known_easing("wobbly")
