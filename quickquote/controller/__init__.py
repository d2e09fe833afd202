"""Grid editing controller — turns input intents into validated store actions."""

from quickquote.controller.quick_quote import QuickQuoteController

__all__ = ["QuickQuoteController"]
