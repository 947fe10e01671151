"""Shared fixtures."""

import pytest
from PyQt5.QtCore import QCoreApplication

from dsviz.core.global_ctrl import GlobalController
from dsviz.core.types import AnimationInstruction, AnimationVerb


@pytest.fixture(scope="session")
def qapp():
    """A Qt core application, needed only where a QTimer actually runs."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def ctrl():
    controller = GlobalController()
    yield controller
    controller.destroy_all()


@pytest.fixture
def instructions():
    """Three 100 ms updates on consecutive array cells."""
    return [
        AnimationInstruction(AnimationVerb.UPDATE, f"array-{index}", duration=100)
        for index in range(3)
    ]
