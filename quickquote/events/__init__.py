"""In-process publish/subscribe for AppEvents."""

from quickquote.events.bus import EventAggregator, EventHandler

__all__ = ["EventAggregator", "EventHandler"]
