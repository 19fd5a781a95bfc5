from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cardstack.domain.constants import DEFAULT_LEARN_LIMIT, DEFAULT_REVIEW_LIMIT
from cardstack.domain.models import CardSortMethod

CONFIG_FILES = [
    Path.home() / ".config/cardstack/config.toml",
    Path.home() / ".cardstack.toml",
]


class SessionSettings(BaseSettings):
    """
    Study-session configuration.
    Supports loading from:
    1. Environment variables (CARDSTACK_*)
    2. Config file (~/.config/cardstack/config.toml)
    3. Explicit overrides
    """

    model_config = SettingsConfigDict(
        env_prefix="CARDSTACK_",
        extra="ignore",
    )

    # Daily caps
    learn_limit: int = Field(default=DEFAULT_LEARN_LIMIT, ge=0)
    review_limit: int = Field(default=DEFAULT_REVIEW_LIMIT, ge=0)
    session_size: int | None = Field(default=None, ge=1)

    # Card ordering
    card_sort_method: CardSortMethod = CardSortMethod.PAIRED
    card_order: Annotated[list[str], NoDecode] = Field(default_factory=list)

    # Grading
    allow_redos: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        toml_file = next((f for f in CONFIG_FILES if f.exists()), None)
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("card_sort_method", mode="before")
    @classmethod
    def normalize_sort_method(cls, v: Any) -> Any:
        # Accept "paired" / "PAIRED" as well as the enum value "Paired"
        if isinstance(v, str):
            for method in CardSortMethod:
                if v.lower() in (method.value.lower(), method.name.lower()):
                    return method
        return v

    @field_validator("card_order", mode="before")
    @classmethod
    def split_card_order(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


def resolve_settings(overrides: dict[str, Any] | None = None) -> SessionSettings:
    """
    Multi-layered settings resolution.
    1. Defaults in SessionSettings
    2. ~/.config/cardstack/config.toml (if exists)
    3. Environment variables (CARDSTACK_*)
    4. overrides (None values are ignored)
    """
    explicit = {k: v for k, v in (overrides or {}).items() if v is not None}
    return SessionSettings(**explicit)
