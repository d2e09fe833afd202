"""Input capture — raw keys, buttons, clicks, and presses to named events."""

from quickquote.input.handler import InputHandler, PressContext

__all__ = ["InputHandler", "PressContext"]
