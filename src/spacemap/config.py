"""Runtime settings for spacemap.

Settings come from defaults, then SPACEMAP_* environment variables, then
command-line options:

    settings = Settings.from_env().merged(max_depth=3, scheme=None)
"""

import logging
import os
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spacemap.models import ColorScheme, Palette

logger = logging.getLogger(__name__)

ENV_PREFIX = "SPACEMAP_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class Settings(BaseModel):
    """Scan, layout and color settings."""

    model_config = ConfigDict(frozen=True)

    case_sensitive: bool | None = Field(
        default=None,
        description="Path comparison policy; unset uses the platform default",
    )
    strict_root: bool = Field(
        default=True,
        description="Fail when the scan root cannot be read instead of reporting it empty",
    )
    max_depth: int = Field(
        default=2,
        ge=0,
        description="Nesting levels drawn below the view root's children",
    )
    padding: int = Field(
        default=1,
        ge=0,
        description="Inset applied to a tile before laying out its children",
    )
    scheme: ColorScheme = Field(default=ColorScheme.BY_PATH, description="Coloring scheme")
    palette: Palette = Field(default=Palette.RAINBOW, description="Hue range for by-path colors")
    show_free_space: bool = Field(
        default=True,
        description="Add a remaining-capacity tile to the top-level view",
    )

    @field_validator("case_sensitive", "strict_root", "show_free_space", mode="before")
    @classmethod
    def parse_bool(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            if lowered == "" or lowered == "auto":
                return None
        return value

    @field_validator("scheme", "palette", mode="before")
    @classmethod
    def parse_enum(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().replace("-", "_")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from SPACEMAP_* environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            Settings with environment values applied over defaults

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        if values:
            logger.debug("Settings from environment: %s", sorted(values))
        return cls(**values)

    def merged(self, **overrides: Any) -> "Settings":
        """Copy with every non-None override applied and validated."""
        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return self
        return self.__class__(**{**self.model_dump(), **updates})
