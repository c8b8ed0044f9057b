from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, QPropertyAnimation
from PySide6.QtGui import QCloseEvent, QKeyEvent, QMouseEvent
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsOpacityEffect,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from typestorm.core.controller import SessionController
from typestorm.core.input_processor import KEY_BACKSPACE, KEY_DELETE, KeyEvent
from typestorm.core.session import SessionSnapshot
from typestorm.ui.colors import StormColors
from typestorm.ui.labels import RESTART_LABEL, control_label, status_text
from typestorm.ui.typing_widgets import PhraseDisplay, SpeedLabel


def key_event_from_qt(event: QKeyEvent) -> KeyEvent:
    """Translate a Qt key press into the core's KeyEvent."""
    key = event.key()
    if key == Qt.Key.Key_Backspace:
        return KeyEvent(KEY_BACKSPACE)
    if key == Qt.Key.Key_Delete:
        return KeyEvent(KEY_DELETE)
    if key == Qt.Key.Key_Space:
        return KeyEvent.from_text(" ")
    text = event.text()
    if len(text) == 1 and text.isprintable():
        return KeyEvent.from_text(text)
    # modifiers, arrows, function keys: named, ignored by the core
    return KeyEvent(f"Qt.Key({int(key)})")


class ArenaFrame(QFrame):
    """Focusable typing area; forwards keys and clicks to the controller."""

    def __init__(self, controller: SessionController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        self.setFocus()
        self._controller.engage()
        super().mousePressEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key_event = key_event_from_qt(event)
        self._controller.handle_key(key_event)
        if key_event.suppress_default or key_event.is_character:
            event.accept()
        else:
            super().keyPressEvent(event)

    def focusNextPrevChild(self, next: bool) -> bool:
        return False

    def focusOutEvent(self, event) -> None:
        self._controller.pause()
        super().focusOutEvent(event)


class MainWindow(QMainWindow):
    """Single-screen window: hero header, typing arena, speed readout and controls.

    The window never touches session state directly; it calls the
    controller's engage/pause/reset_or_advance/handle_key and re-renders
    from the snapshots the controller publishes.
    """

    def __init__(self, controller: SessionController) -> None:
        super().__init__()
        self._controller = controller
        self._last_error = False

        self._arena: Optional[ArenaFrame] = None
        self._phrase_display: Optional[PhraseDisplay] = None
        self._speed_label: Optional[SpeedLabel] = None
        self._status_label: Optional[QLabel] = None
        self._mistakes_label: Optional[QLabel] = None
        self._start_button: Optional[QPushButton] = None
        self._next_button: Optional[QPushButton] = None

        self._error_overlay: Optional[QWidget] = None
        self._error_overlay_effect: Optional[QGraphicsOpacityEffect] = None
        self._error_overlay_anim: Optional[QPropertyAnimation] = None

        self._build_ui()
        self._unsubscribe = controller.subscribe(self._render)
        self._render(controller.snapshot())

    def _build_ui(self) -> None:
        self.setWindowTitle("TypeStorm")
        self.resize(1100, 720)

        root = QWidget()
        root.setStyleSheet(f"background-color: {StormColors.BG}; color: {StormColors.TEXT_PRIMARY};")
        layout = QVBoxLayout(root)
        layout.setContentsMargins(48, 36, 48, 36)
        layout.setSpacing(24)

        title = QLabel("TYPE STORM")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(
            f"font-size: 72px; font-weight: 900; letter-spacing: -2px; color: {StormColors.CYAN_LIGHT};"
        )
        subtitle = QLabel("ZERO LATENCY • HARD MODE")
        subtitle.setAlignment(Qt.AlignCenter)
        subtitle.setStyleSheet(
            f"font-size: 18px; font-family: monospace; letter-spacing: 4px; color: {StormColors.TEXT_SECONDARY};"
        )
        layout.addWidget(title)
        layout.addWidget(subtitle)

        self._start_button = QPushButton("Start typing")
        self._start_button.setCursor(Qt.PointingHandCursor)
        self._start_button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self._start_button.setStyleSheet(self._button_style(StormColors.CYAN))
        self._start_button.clicked.connect(self._on_start_clicked)
        start_row = QHBoxLayout()
        start_row.addStretch(1)
        start_row.addWidget(self._start_button)
        start_row.addStretch(1)
        layout.addLayout(start_row)

        self._arena = ArenaFrame(self._controller)
        self._arena.setStyleSheet(self._arena_style(StormColors.CARD_BORDER))
        arena_layout = QVBoxLayout(self._arena)
        arena_layout.setContentsMargins(24, 24, 24, 24)

        self._phrase_display = PhraseDisplay()
        arena_layout.addWidget(self._phrase_display, 1)

        self._status_label = QLabel("")
        self._status_label.setAlignment(Qt.AlignCenter)
        self._status_label.setStyleSheet(
            f"font-size: 16px; font-family: monospace; color: {StormColors.TEXT_MUTED}; border: none;"
        )
        arena_layout.addWidget(self._status_label)
        layout.addWidget(self._arena, 1)

        stats_row = QHBoxLayout()
        self._speed_label = SpeedLabel()
        self._mistakes_label = QLabel("")
        self._mistakes_label.setStyleSheet(
            f"font-size: 16px; font-family: monospace; color: {StormColors.TEXT_MUTED};"
        )
        self._next_button = QPushButton(RESTART_LABEL)
        self._next_button.setCursor(Qt.PointingHandCursor)
        self._next_button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self._next_button.setStyleSheet(self._button_style(StormColors.PURPLE))
        self._next_button.clicked.connect(self._on_next_clicked)
        stats_row.addWidget(self._speed_label)
        stats_row.addStretch(1)
        stats_row.addWidget(self._mistakes_label)
        stats_row.addSpacing(24)
        stats_row.addWidget(self._next_button)
        layout.addLayout(stats_row)

        self.setCentralWidget(root)

        self._error_overlay = QWidget(self)
        self._error_overlay.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._error_overlay.setStyleSheet(f"background-color: {StormColors.ERROR};")
        self._error_overlay_effect = QGraphicsOpacityEffect(self._error_overlay)
        self._error_overlay_effect.setOpacity(0.0)
        self._error_overlay.setGraphicsEffect(self._error_overlay_effect)
        self._error_overlay.hide()
        self._error_overlay_anim = QPropertyAnimation(self._error_overlay_effect, b"opacity", self)
        self._error_overlay_anim.setDuration(self._controller.settings.error_window_ms)
        self._error_overlay_anim.setKeyValueAt(0.0, 0.0)
        self._error_overlay_anim.setKeyValueAt(0.2, 0.22)
        self._error_overlay_anim.setKeyValueAt(1.0, 0.0)
        self._error_overlay_anim.finished.connect(self._error_overlay.hide)

    @staticmethod
    def _button_style(accent: str) -> str:
        return f"""
            QPushButton {{
                background: {StormColors.CARD_BG};
                color: {StormColors.TEXT_PRIMARY};
                border: 1px solid {StormColors.CARD_BORDER};
                border-radius: 22px;
                padding: 10px 28px;
                font-size: 16px;
                font-weight: 700;
            }}
            QPushButton:hover {{
                border: 1px solid {accent};
                color: {accent};
            }}
        """

    @staticmethod
    def _arena_style(border: str) -> str:
        return f"""
            ArenaFrame {{
                background: {StormColors.BG_PANEL};
                border: 2px solid {border};
                border-radius: 24px;
            }}
        """

    # ------------------------------------------------------------------
    # control actions
    # ------------------------------------------------------------------

    def _on_start_clicked(self) -> None:
        if self._arena is not None:
            self._arena.setFocus()
        self._controller.engage()

    def _on_next_clicked(self) -> None:
        self._controller.reset_or_advance()
        if self._arena is not None:
            self._arena.setFocus()

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------

    def _render(self, snap: SessionSnapshot) -> None:
        if self._phrase_display is not None:
            self._phrase_display.set_snapshot(snap)
        if self._speed_label is not None:
            self._speed_label.set_speed(snap.speed)
        if self._mistakes_label is not None:
            self._mistakes_label.setText(f"{snap.mistakes} missed" if snap.mistakes else "")
        if self._start_button is not None:
            self._start_button.setVisible(not snap.engaged and not snap.completed)
        if self._status_label is not None:
            self._status_label.setText(status_text(snap))
        if self._next_button is not None:
            self._next_button.setText(control_label(snap))
        if self._arena is not None:
            if snap.completed:
                border = StormColors.SUCCESS
            elif snap.error_signal:
                border = StormColors.ERROR
            elif snap.engaged:
                border = StormColors.CYAN
            else:
                border = StormColors.CARD_BORDER
            self._arena.setStyleSheet(self._arena_style(border))

        if snap.error_signal and not self._last_error:
            self._flash_invalid_input_overlay()
        self._last_error = snap.error_signal

    def _update_error_overlay_geometry(self) -> None:
        """Resize the error-flash overlay to cover the full window."""
        if not self._error_overlay:
            return
        s = self.size()
        self._error_overlay.setGeometry(0, 0, s.width(), s.height())

    def _flash_invalid_input_overlay(self) -> None:
        """Flash a short red overlay on a rejected keystroke."""
        if not self._error_overlay or not self._error_overlay_effect or not self._error_overlay_anim:
            return
        self._error_overlay_anim.stop()
        self._update_error_overlay_geometry()
        self._error_overlay.show()
        self._error_overlay.raise_()
        self._error_overlay_effect.setOpacity(0.0)
        self._error_overlay_anim.start()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._update_error_overlay_geometry()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Cancel session timers when the window closes."""
        self._unsubscribe()
        self._controller.shutdown()
        super().closeEvent(event)
