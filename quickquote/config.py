"""Application configuration via pydantic-settings.

Values are loaded from environment variables (.env file). Settings are
organized into logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quickquote.models.enums import ClearRowPolicy, SequenceClickPolicy, TypeButtonLongPressPolicy


class EditorSettings(BaseSettings):
    """Grid editing behaviour. The three policies are product decisions, not defaults of convenience."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="EDITOR_", extra="ignore")

    sequence_click_policy: SequenceClickPolicy = Field(
        default=SequenceClickPolicy.PRESERVE,
        description="Whether a row-number click keeps other selected rows",
    )
    type_button_long_press_policy: TypeButtonLongPressPolicy = Field(
        default=TypeButtonLongPressPolicy.USE_SELECTION,
        description="Rows targeted by a long press on the TYPE button",
    )
    clear_row_policy: ClearRowPolicy = Field(
        default=ClearRowPolicy.SINGLE,
        description="Selection size accepted by the clear/delete confirmation",
    )
    long_press_ms: int = Field(default=700, ge=50, description="Hold time before a press counts as long")


class CatalogSettings(BaseSettings):
    """Fabric types and product keys known to the quote."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CATALOG_", extra="ignore")

    default_product: str = Field(default="roller_blind")
    fabric_type_sequence: list[str] = Field(
        default_factory=lambda: ["B1", "B2", "B3", "B4", "B5", "SN"],
        description="Order used when cycling a row's fabric type",
    )
    fabric_type_names: dict[str, str] = Field(
        default_factory=lambda: {
            "B1": "Blockout Standard",
            "B2": "Blockout Premium",
            "B3": "Blockout Textured",
            "B4": "Light Filter",
            "B5": "Light Filter Premium",
            "SN": "Screen / Sunscreen",
        },
        description="Human-readable price matrix names by fabric type code",
    )


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.editor.clear_row_policy
        settings.catalog.fabric_type_sequence
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    editor: EditorSettings = Field(default_factory=EditorSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


# Module-level singleton; import this wherever settings are needed.
settings = Settings()
