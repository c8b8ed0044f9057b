"""Typing arena UI: phrase display and live speed label."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QPainter, QPen
from PySide6.QtWidgets import QLabel, QWidget

from typestorm.core.session import CHAR_CURRENT, CHAR_TYPED, SessionSnapshot
from typestorm.ui.colors import StormColors, speed_color


class PhraseDisplay(QWidget):
    """Monospace phrase with typed (cyan), current (boxed) and pending (gray) characters."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._snapshot: Optional[SessionSnapshot] = None
        self.setMinimumHeight(160)
        self.setMinimumWidth(320)
        font = self.font()
        font.setFamily("monospace")
        font.setStyleHint(QFont.StyleHint.Monospace)
        font.setPointSize(22)
        self.setFont(font)

    def set_snapshot(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = snapshot
        self.update()

    def paintEvent(self, event) -> None:
        """Paint the phrase, wrapping at the widget width."""
        super().paintEvent(event)
        snap = self._snapshot
        if snap is None or not snap.phrase:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setFont(self.font())

        metrics = QFontMetricsF(self.font())
        char_w = metrics.horizontalAdvance("M")
        line_h = metrics.height() * 1.5
        margin = 16.0
        per_line = max(1, int((self.width() - 2 * margin) // char_w))

        for i, (ch, state) in enumerate(zip(snap.phrase, snap.char_states())):
            row, col = divmod(i, per_line)
            rect = QRectF(margin + col * char_w, margin + row * line_h, char_w, line_h)
            if state == CHAR_TYPED:
                painter.setPen(QColor(StormColors.TYPED))
            elif state == CHAR_CURRENT:
                bg = StormColors.ERROR_BG if snap.error_signal else StormColors.CURRENT_BG
                fg = StormColors.ERROR if snap.error_signal else StormColors.TEXT_PRIMARY
                painter.setPen(Qt.NoPen)
                painter.setBrush(QColor(bg))
                painter.drawRoundedRect(rect.adjusted(0, 4, 0, -4), 4, 4)
                painter.setPen(QPen(QColor(fg)))
            else:
                painter.setPen(QColor(StormColors.PENDING))
            painter.drawText(rect, Qt.AlignCenter, ch)


class SpeedLabel(QLabel):
    """Large WPM readout."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.set_speed(0)

    def set_speed(self, wpm: int) -> None:
        self.setText(f"{wpm} WPM")
        self.setStyleSheet(
            f"""
            QLabel {{
                color: {speed_color(wpm)};
                font-size: 40px;
                font-weight: 900;
                font-family: monospace;
            }}
            """
        )
