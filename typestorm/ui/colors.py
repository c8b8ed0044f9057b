"""Theme colors and color utilities for the UI."""


class StormColors:
    """Dark aurora palette."""

    BG = "#000000"
    BG_PANEL = "#0b0b12"

    CYAN = "#22d3ee"
    CYAN_LIGHT = "#a5f3fc"
    PURPLE = "#c084fc"
    PINK = "#f472b6"

    TYPED = "#22d3ee"
    CURRENT_BG = "#164e63"
    PENDING = "#52525b"

    ERROR = "#ef4444"
    ERROR_BG = "#450a0a"
    SUCCESS = "#4ade80"

    TEXT_PRIMARY = "#ffffff"
    TEXT_SECONDARY = "#a5f3fc"
    TEXT_MUTED = "#71717a"

    CARD_BG = "rgba(255, 255, 255, 0.05)"
    CARD_BORDER = "rgba(255, 255, 255, 0.1)"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except (ValueError, TypeError):
        return a


def speed_color(wpm: int) -> str:
    """Cyan for slow speeds shading into purple around 80 WPM."""
    return blend_hex(StormColors.CYAN, StormColors.PURPLE, wpm / 80.0)
