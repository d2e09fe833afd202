"""Configuration collaborator backed by CatalogSettings.

Answers the two questions the controller asks about fabric types: the
cycling order, and the price matrix (for its display name) of one type.
"""

from __future__ import annotations

import logging

from quickquote.config import CatalogSettings, settings
from quickquote.schemas.collaborators import PriceMatrix

logger = logging.getLogger(__name__)


class ConfigManager:
    """Read-only view over the fabric catalog."""

    def __init__(self, catalog: CatalogSettings | None = None) -> None:
        self._catalog = catalog or settings.catalog

    def get_fabric_type_sequence(self) -> list[str]:
        return list(self._catalog.fabric_type_sequence)

    def get_price_matrix(self, fabric_type: str) -> PriceMatrix | None:
        """Price matrix metadata for a type code, or None when the code is not configured."""
        name = self._catalog.fabric_type_names.get(fabric_type)
        if name is None:
            logger.debug("No price matrix configured for fabric type %s", fabric_type)
            return None
        return PriceMatrix(name=name, code=fabric_type)
