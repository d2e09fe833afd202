"""Composition root — wires store, bus, controller, gateway, and input handler.

Usage:
    python -m quickquote.main

Runs a short scripted session against the default catalog and logs each
state change. Embedding applications call ``create_editor()`` and attach
their own presenter and renderer.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass

import structlog

from quickquote.catalog import ConfigManager
from quickquote.config import Settings, settings
from quickquote.controller.quick_quote import QuickQuoteController
from quickquote.events.bus import EventAggregator
from quickquote.input.handler import InputHandler
from quickquote.models.enums import NotificationType
from quickquote.notifications.gateway import NotificationGateway
from quickquote.schemas.dialogs import ConfirmationRequest
from quickquote.schemas.quote import QuoteData, QuoteState
from quickquote.services.protocols import CalculationService, FileService, ProductFactory
from quickquote.store.service import QuoteStore

logger = logging.getLogger(__name__)


# ── Logging setup ────────────────────────────────────────────────────


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib logging and route structlog through it."""
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        stream=sys.stdout,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


# ── Wiring ───────────────────────────────────────────────────────────


@dataclass
class QuoteEditor:
    """One quote session and everything attached to it."""

    store: QuoteStore
    bus: EventAggregator
    controller: QuickQuoteController
    gateway: NotificationGateway
    input: InputHandler


def create_editor(
    *,
    app_settings: Settings | None = None,
    calculation_service: CalculationService | None = None,
    product_factory: ProductFactory | None = None,
    file_service: FileService | None = None,
    initial_state: QuoteState | None = None,
) -> QuoteEditor:
    """Build a fully wired editor session."""
    app_settings = app_settings or settings
    config_manager = ConfigManager(app_settings.catalog)

    state = initial_state or QuoteState(quote_data=QuoteData(current_product=app_settings.catalog.default_product))
    store = QuoteStore(state, fabric_sequence=config_manager.get_fabric_type_sequence())
    bus = EventAggregator()

    controller = QuickQuoteController(
        store,
        bus,
        config_manager=config_manager,
        calculation_service=calculation_service,
        product_factory=product_factory,
        file_service=file_service,
        editor_settings=app_settings.editor,
    )
    controller.register()

    gateway = NotificationGateway()
    gateway.register(bus)

    input_handler = InputHandler(bus, long_press_ms=app_settings.editor.long_press_ms)

    logger.info(
        "Editor ready (product=%s, %d fabric types, %d subscribers)",
        state.quote_data.current_product,
        len(store.fabric_sequence),
        bus.subscriber_count,
    )
    return QuoteEditor(store=store, bus=bus, controller=controller, gateway=gateway, input=input_handler)


# ── Entry point ──────────────────────────────────────────────────────


async def _demo() -> None:
    editor = create_editor()
    log = structlog.get_logger("quickquote.demo")

    async def show_notification(message: str, level: NotificationType) -> None:
        log.info("notification", level=level.value, message=message)

    async def show_confirmation(request: ConfirmationRequest) -> None:
        log.info("confirmation", message=request.message, choices=[b.label for b in request.buttons])

    editor.gateway.set_presenter(show_notification, show_confirmation)
    editor.store.subscribe(lambda state: log.debug("state", rows=len(state.items), ui=state.ui.model_dump()))

    for button in ("key-1", "key-5", "key-0", "key-ent", "key-2", "key-0", "key-0", "key-ent"):
        await editor.input.handle_keyboard_click(button)
    await editor.input.handle_table_click(0, "sequence")
    await editor.input.handle_keyboard_click("key-clear")

    state = editor.store.get_state()
    log.info("done", items=[item.model_dump(exclude_none=True) for item in state.items])


if __name__ == "__main__":
    configure_logging()
    asyncio.run(_demo())
