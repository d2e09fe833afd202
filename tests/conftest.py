"""Shared fixtures: snapshot builders and a wired controller harness."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from quickquote.catalog import ConfigManager
from quickquote.config import CatalogSettings, EditorSettings
from quickquote.controller.quick_quote import QuickQuoteController
from quickquote.events.bus import EventAggregator
from quickquote.models.enums import Column
from quickquote.schemas.dialogs import ConfirmationRequest
from quickquote.schemas.events import AppEvent, EventType
from quickquote.schemas.quote import ActiveCell, Item, QuoteData, QuoteState, UiState
from quickquote.store.service import QuoteStore

FABRIC_TYPES = ["B1", "B2", "B3"]
FABRIC_NAMES = {"B1": "Blockout", "B2": "Light Filter"}  # B3 has no price matrix


def build_state(
    items: list[Item] | tuple[Item, ...] = (),
    *,
    selected: tuple[int, ...] | set[int] = (),
    active: tuple[int, Column] | None = (0, Column.WIDTH),
    input_value: str = "",
    multi_select_mode: bool = False,
    is_sum_outdated: bool = False,
) -> QuoteState:
    """Snapshot with the given data rows followed by the sentinel row."""
    active_cell = ActiveCell(row_index=active[0], column=active[1]) if active else None
    return QuoteState(
        quote_data=QuoteData(items=(*items, Item())),
        ui=UiState(
            active_cell=active_cell,
            input_value=input_value,
            selected_indexes=frozenset(selected),
            multi_select_mode=multi_select_mode,
            is_sum_outdated=is_sum_outdated,
        ),
    )


@dataclass
class Harness:
    """Controller wired to a real store and bus, recording outbound UI requests."""

    store: QuoteStore
    bus: EventAggregator
    controller: QuickQuoteController
    events: list[AppEvent] = field(default_factory=list)

    @property
    def state(self) -> QuoteState:
        return self.store.get_state()

    @property
    def notifications(self) -> list[dict[str, Any]]:
        return [e.data for e in self.events if e.event_type == EventType.SHOW_NOTIFICATION]

    @property
    def confirmations(self) -> list[ConfirmationRequest]:
        return [e.data["request"] for e in self.events if e.event_type == EventType.SHOW_CONFIRMATION_DIALOG]


@pytest.fixture()
def make_state():
    return build_state


@pytest.fixture()
def make_harness():
    """Factory for a controller harness around a given snapshot and policies."""
    def _make(state: QuoteState | None = None, **editor_overrides: Any) -> Harness:
        store = QuoteStore(state or build_state(), fabric_sequence=FABRIC_TYPES)
        bus = EventAggregator()
        controller = QuickQuoteController(
            store,
            bus,
            config_manager=ConfigManager(
                CatalogSettings(fabric_type_sequence=FABRIC_TYPES, fabric_type_names=FABRIC_NAMES)
            ),
            editor_settings=EditorSettings(**editor_overrides),
        )
        harness = Harness(store=store, bus=bus, controller=controller)

        async def record(event: AppEvent) -> None:
            harness.events.append(event)

        bus.subscribe(record, [EventType.SHOW_NOTIFICATION, EventType.SHOW_CONFIRMATION_DIALOG, EventType.TRIGGER_FILE_LOAD])
        return harness
    return _make
