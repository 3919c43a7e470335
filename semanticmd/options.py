"""Validated conversion options."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from semanticmd.errors import InvalidConfiguration

# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


class MetaDataMode(str, Enum):
    NONE = "none"
    BASIC = "basic"
    EXTENDED = "extended"


class EscapeMode(str, Enum):
    SMART = "smart"
    DISABLED = "disabled"


def _coerce_mode(value: Any, empty: Enum) -> Any:
    if value is None:
        return empty
    if isinstance(value, str) and not isinstance(value, Enum):
        value = value.strip().lower()
        if not value:
            return empty
    return value


# ---------------------------------------------------------------------------
# Options model
# ---------------------------------------------------------------------------


class ConversionOptions(BaseModel):
    """Immutable settings for one conversion call.

    The four ``*_element*``/``*_render*`` fields are optional hooks, see
    :mod:`semanticmd.hooks` for their call signatures.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    website_domain: str = ""
    extract_main_content: bool = False
    include_metadata: MetaDataMode = MetaDataMode.NONE
    refify_urls: bool = False
    enable_table_column_tracking: bool = False
    escape_mode: EscapeMode = EscapeMode.SMART

    override_element_processing: Any = None
    process_unhandled_element: Any = None
    override_node_renderer: Any = None
    render_custom_node: Any = None

    @field_validator("include_metadata", mode="before")
    @classmethod
    def _normalise_metadata(cls, v: Any) -> Any:
        return _coerce_mode(v, MetaDataMode.NONE)

    @field_validator("escape_mode", mode="before")
    @classmethod
    def _normalise_escape(cls, v: Any) -> Any:
        return _coerce_mode(v, EscapeMode.SMART)

    @field_validator(
        "override_element_processing",
        "process_unhandled_element",
        "override_node_renderer",
        "render_custom_node",
    )
    @classmethod
    def _must_be_callable(cls, v: Any) -> Any:
        if v is not None and not callable(v):
            raise ValueError("hook must be callable")
        return v

    @classmethod
    def build(cls, **values: Any) -> ConversionOptions:
        """Validate *values*, raising :class:`InvalidConfiguration` on failure."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise InvalidConfiguration(_describe(exc)) from exc

    def merged(self, **overrides: Any) -> ConversionOptions:
        """Return a copy with *overrides* applied and re-validated."""
        if not overrides:
            return self
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(overrides)
        return type(self).build(**values)

    @property
    def metadata_enabled(self) -> bool:
        return self.include_metadata is not MetaDataMode.NONE


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "options"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "invalid conversion options: " + "; ".join(parts)
