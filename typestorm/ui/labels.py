"""Text shown by the main window for a given session snapshot."""

from __future__ import annotations

from typestorm.core.session import SessionSnapshot

RESTART_LABEL = "Restart"
NEXT_LABEL = "Next challenge"


def control_label(snap: SessionSnapshot) -> str:
    """Restart while typing, next challenge once the phrase is done."""
    return NEXT_LABEL if snap.completed else RESTART_LABEL


def status_text(snap: SessionSnapshot) -> str:
    if snap.completed:
        return f"Completed at {snap.speed} WPM. Press {NEXT_LABEL} for another."
    if not snap.engaged:
        return "Paused. Click the arena to continue." if snap.started else "Click to start."
    if not snap.started:
        return "Start typing. No backspace."
    return f"{int(snap.progress * 100)}%"
