"""
DMC thread palette for Stitch Genie.

Colors can be looked up by DMC code ("310" or "#310"), by name, or given as
a raw "#RRGGBB" value.
"""

from stitchgenie.errors import InvalidConfig
from stitchgenie.models import ThreadColor


DMC_COLORS = [
    ThreadColor(name="Red", dmc="321", hex="#DE313A"),
    ThreadColor(name="Bright Orange", dmc="608", hex="#FF6C00"),
    ThreadColor(name="Dark Lemon", dmc="444", hex="#FFBF00"),
    ThreadColor(name="Green", dmc="699", hex="#008848"),
    ThreadColor(name="Dark Delft Blue", dmc="798", hex="#40548B"),
    ThreadColor(name="Black", dmc="310", hex="#000000"),
]

DEFAULT_THREAD = DMC_COLORS[-1]


def find_thread(key):
    """
    Find a palette entry by DMC code or name (case-insensitive).

    Returns None when no entry matches.
    """
    text = str(key).strip()
    code = text.lstrip("#")
    for color in DMC_COLORS:
        if color.dmc == code or color.name.lower() == text.lower():
            return color
    return None


def resolve_thread_color(key):
    """
    Resolve a color key to a (hex, ThreadColor or None) pair.

    Palette matches take precedence; otherwise the key must be a
    six-digit hex color.
    """
    thread = find_thread(key)
    if thread is not None:
        return thread.hex, thread

    text = str(key).strip()
    value = text.lstrip("#")
    if len(value) == 6 and all(c in "0123456789abcdefABCDEF" for c in value):
        hex_color = "#" + value.upper()
        for color in DMC_COLORS:
            if color.hex == hex_color:
                return hex_color, color
        return hex_color, None

    raise InvalidConfig("thread_color", key, "not a DMC code, palette name or #RRGGBB color")
