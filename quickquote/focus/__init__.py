"""Focus and navigation policy."""

from quickquote.focus.policy import FocusPolicy

__all__ = ["FocusPolicy"]
