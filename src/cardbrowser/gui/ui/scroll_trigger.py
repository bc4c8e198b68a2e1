"""Qt visibility trigger for a sentinel widget inside a scroll area."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from PySide6.QtCore import QEvent, QObject, QPoint, QRect, QTimer
from PySide6.QtWidgets import QAbstractScrollArea, QWidget

from ...application.interfaces import VisibilityTrigger
from ...config import VISIBILITY_THRESHOLD

logger = logging.getLogger(__name__)


def visible_fraction(viewport_rect: QRect, sentinel_rect: QRect) -> float:
    """Share of *sentinel_rect* inside *viewport_rect*, in ``[0, 1]``.

    A sentinel with no area counts as fully visible when its top-left corner
    lies in the viewport.
    """
    area = sentinel_rect.width() * sentinel_rect.height()
    if area <= 0:
        return 1.0 if viewport_rect.contains(sentinel_rect.topLeft()) else 0.0
    overlap = viewport_rect.intersected(sentinel_rect)
    if overlap.isEmpty():
        return 0.0
    return (overlap.width() * overlap.height()) / area


class _Watch:
    __slots__ = ("callback", "visible")

    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.visible = False


class ScrollAreaVisibilityTrigger(QObject):
    """Fire a callback when a sentinel scrolls into a scroll area's viewport.

    Visibility is re-evaluated on scrollbar movement, scroll range changes
    (content grew) and viewport resizes.  A callback only fires on the
    hidden → visible transition; :meth:`rearm` resets that edge.
    """

    def __init__(
        self,
        scroll_area: QAbstractScrollArea,
        threshold: float = VISIBILITY_THRESHOLD,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0 and 1")
        self._scroll_area = scroll_area
        self._threshold = threshold
        self._watches: Dict[QWidget, _Watch] = {}
        self._connected = False

    # VisibilityTrigger --------------------------------------------------

    def arm(self, sentinel: QWidget, callback: Callable[[], None]) -> None:
        self._watches[sentinel] = _Watch(callback)
        self._connect()
        QTimer.singleShot(0, self.check)

    def rearm(self, sentinel: QWidget) -> None:
        watch = self._watches.get(sentinel)
        if watch is None:
            return
        watch.visible = False
        # Give the layout a turn to place newly added rows first.
        QTimer.singleShot(0, self.check)

    def disarm(self, sentinel: QWidget) -> None:
        self._watches.pop(sentinel, None)
        if not self._watches:
            self._disconnect()

    # ------------------------------------------------------------------

    def is_visible(self, sentinel: QWidget) -> bool:
        if not sentinel.isVisible():
            return False
        viewport = self._scroll_area.viewport()
        top_left = sentinel.mapTo(viewport, QPoint(0, 0))
        sentinel_rect = QRect(top_left, sentinel.size())
        return visible_fraction(viewport.rect(), sentinel_rect) >= self._threshold

    def check(self) -> None:
        for sentinel, watch in list(self._watches.items()):
            visible = self.is_visible(sentinel)
            if visible and not watch.visible:
                watch.visible = True
                logger.debug("Sentinel entered the viewport")
                watch.callback()
            elif not visible:
                watch.visible = False

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802 - Qt API
        if event.type() == QEvent.Type.Resize:
            self.check()
        return super().eventFilter(watched, event)

    def _connect(self) -> None:
        if self._connected:
            return
        bar = self._scroll_area.verticalScrollBar()
        bar.valueChanged.connect(self._on_scrolled)
        bar.rangeChanged.connect(self._on_range_changed)
        self._scroll_area.viewport().installEventFilter(self)
        self._connected = True

    def _disconnect(self) -> None:
        if not self._connected:
            return
        bar = self._scroll_area.verticalScrollBar()
        bar.valueChanged.disconnect(self._on_scrolled)
        bar.rangeChanged.disconnect(self._on_range_changed)
        self._scroll_area.viewport().removeEventFilter(self)
        self._connected = False

    def _on_scrolled(self, _value: int) -> None:
        self.check()

    def _on_range_changed(self, _minimum: int, _maximum: int) -> None:
        self.check()


VisibilityTrigger.register(ScrollAreaVisibilityTrigger)
