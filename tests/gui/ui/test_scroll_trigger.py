"""Tests for the Qt scroll area visibility trigger."""

import pytest

pytest.importorskip("PySide6", reason="PySide6 not available", exc_type=ImportError)

from PySide6.QtCore import QRect  # noqa: E402
from PySide6.QtWidgets import QApplication, QScrollArea, QVBoxLayout, QWidget  # noqa: E402

from cardbrowser.application.interfaces import VisibilityTrigger  # noqa: E402
from cardbrowser.gui.ui.scroll_trigger import (  # noqa: E402
    ScrollAreaVisibilityTrigger,
    visible_fraction,
)


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


class TestVisibleFraction:
    def test_fully_inside(self):
        assert visible_fraction(QRect(0, 0, 100, 100), QRect(10, 10, 20, 20)) == 1.0

    def test_outside(self):
        assert visible_fraction(QRect(0, 0, 100, 100), QRect(0, 200, 20, 20)) == 0.0

    def test_partial(self):
        assert visible_fraction(QRect(0, 0, 100, 100), QRect(0, 90, 100, 20)) == pytest.approx(0.5)

    def test_zero_area_uses_corner(self):
        assert visible_fraction(QRect(0, 0, 100, 100), QRect(5, 5, 0, 0)) == 1.0
        assert visible_fraction(QRect(0, 0, 100, 100), QRect(5, 500, 0, 0)) == 0.0


def _scroll_area(content_height):
    area = QScrollArea()
    area.resize(200, 200)
    content = QWidget()
    layout = QVBoxLayout(content)
    layout.setContentsMargins(0, 0, 0, 0)
    spacer = QWidget()
    spacer.setFixedHeight(content_height)
    sentinel = QWidget()
    sentinel.setFixedHeight(10)
    layout.addWidget(spacer)
    layout.addWidget(sentinel)
    area.setWidget(content)
    area.setWidgetResizable(True)
    area.show()
    QApplication.processEvents()
    return area, sentinel


class TestScrollAreaVisibilityTrigger:
    def test_is_a_visibility_trigger(self, qapp):
        area, _ = _scroll_area(50)
        assert isinstance(ScrollAreaVisibilityTrigger(area), VisibilityTrigger)

    def test_rejects_bad_threshold(self, qapp):
        area, _ = _scroll_area(50)
        with pytest.raises(ValueError):
            ScrollAreaVisibilityTrigger(area, threshold=1.5)

    def test_fires_once_when_visible(self, qapp):
        area, sentinel = _scroll_area(50)
        trigger = ScrollAreaVisibilityTrigger(area)
        calls = []
        trigger.arm(sentinel, lambda: calls.append(1))

        trigger.check()
        trigger.check()

        assert calls == [1]

    def test_rearm_allows_another_fire(self, qapp):
        area, sentinel = _scroll_area(50)
        trigger = ScrollAreaVisibilityTrigger(area)
        calls = []
        trigger.arm(sentinel, lambda: calls.append(1))
        trigger.check()

        trigger.rearm(sentinel)
        trigger.check()

        assert calls == [1, 1]

    def test_fires_after_scrolling_into_view(self, qapp):
        area, sentinel = _scroll_area(2000)
        trigger = ScrollAreaVisibilityTrigger(area)
        calls = []
        trigger.arm(sentinel, lambda: calls.append(1))
        trigger.check()
        assert calls == []

        bar = area.verticalScrollBar()
        bar.setValue(bar.maximum())
        QApplication.processEvents()

        assert calls == [1]

    def test_disarm_stops_firing(self, qapp):
        area, sentinel = _scroll_area(50)
        trigger = ScrollAreaVisibilityTrigger(area)
        calls = []
        trigger.arm(sentinel, lambda: calls.append(1))
        trigger.disarm(sentinel)

        trigger.check()

        assert calls == []


def test_app_context_builds_trigger_from_settings(qapp, tmp_path):
    import json

    from cardbrowser.appctx import AppContext
    from cardbrowser.gui.ui import ScrollAreaVisibilityTrigger as Exported
    from cardbrowser.settings.manager import SettingsManager

    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"ui": {"visibility_threshold": 1.0}}), encoding="utf-8")
    settings = SettingsManager(path=settings_path)
    settings.load()
    context = AppContext(settings=settings)

    # A sentinel half outside the viewport does not meet a threshold of 1.0.
    area, sentinel = _scroll_area(2000)
    trigger = context.create_visibility_trigger(area)
    assert isinstance(trigger, Exported)
    bar = area.verticalScrollBar()
    bar.setValue(bar.maximum() - 5)
    QApplication.processEvents()
    assert trigger.is_visible(sentinel) is False

    bar.setValue(bar.maximum())
    QApplication.processEvents()
    assert trigger.is_visible(sentinel) is True
