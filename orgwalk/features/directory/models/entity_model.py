"""Entity model for directory people.

An Entity keeps the attributes the traversal relies on as typed fields and
passes every organization-defined attribute through untouched in a separate
`attributes` mapping.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class Entity(BaseModel):
    """A person record as returned by the directory service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = Field(..., min_length=1, description="Stable opaque identifier")
    primary_email: str | None = Field(
        default=None, alias="primaryEmail", description="Email-like alternate key"
    )
    display_name: str | None = Field(default=None, alias="displayName")
    title: str | None = Field(default=None)
    team_leader_id: str | None = Field(
        default=None, alias="teamLeaderId", description="Identifier of the superior"
    )
    direct_report_count: int | None = Field(default=None, alias="directReportCount")
    total_report_count: int | None = Field(default=None, alias="totalReportCount")
    reporting_path: list[str] = Field(
        default_factory=list,
        alias="reportingPath",
        description="Superior identifiers from the root down to the immediate superior",
    )
    attributes: dict[str, Any] = Field(
        default_factory=dict,
        description="Organization-defined attributes, passed through opaquely",
    )

    @model_validator(mode="before")
    @classmethod
    def collect_attributes(cls, data: Any) -> Any:
        """Move every unknown key into the `attributes` side mapping.

        Text fields holding something other than a string are kept verbatim
        in `attributes` and left unset on the typed side.
        """
        if not isinstance(data, dict):
            return data

        known = _known_keys()
        core: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            if key == "attributes" and isinstance(value, dict):
                extra.update(value)
            elif key in _TEXT_KEYS and not (value is None or isinstance(value, str)):
                logger.debug("Keeping non-string %s in attributes", key)
                extra[key] = value
            elif key in known:
                core[key] = value
            else:
                extra[key] = value
        core["attributes"] = extra
        return core

    @field_validator("id", "team_leader_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        """Accept numeric identifiers and treat blank superiors as missing."""
        if isinstance(v, bool):
            return v
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("direct_report_count", "total_report_count", mode="before")
    @classmethod
    def coerce_count(cls, v: Any) -> int | None:
        """Malformed counts are treated as unknown rather than rejected."""
        if v is None or isinstance(v, bool):
            return None
        try:
            count = int(v)
        except (TypeError, ValueError):
            return None
        return count if count >= 0 else None

    @field_validator("reporting_path", mode="before")
    @classmethod
    def sanitize_reporting_path(cls, v: Any) -> list[str]:
        """Keep the usable identifiers of a possibly malformed path."""
        if not isinstance(v, (list, tuple)):
            if v is not None:
                logger.debug("Ignoring malformed reportingPath of type %s", type(v))
            return []
        path: list[str] = []
        for item in v:
            if isinstance(item, bool):
                continue
            if isinstance(item, int):
                item = str(item)
            if isinstance(item, str) and item.strip():
                path.append(item.strip())
        return path

    @property
    def has_direct_reports(self) -> bool:
        """Whether the entity reports at least one direct subordinate."""
        return (self.direct_report_count or 0) > 0

    def get(self, key: str, default: Any = None) -> Any:
        """Look up an attribute by wire name, field name or custom key."""
        field_name = _WIRE_TO_FIELD.get(key, key)
        if field_name in _TYPED_FIELDS:
            return getattr(self, field_name)
        return self.attributes.get(key, default)

    def to_wire(self) -> dict[str, Any]:
        """Flatten back into the directory service's JSON shape."""
        payload = dict(self.attributes)
        typed = self.model_dump(by_alias=True, exclude={"attributes"})
        for key, value in typed.items():
            if value is None and key in payload:
                continue
            payload[key] = value
        return payload


_TYPED_FIELDS = frozenset(name for name in Entity.model_fields if name != "attributes")
_WIRE_TO_FIELD = {
    info.alias: name
    for name, info in Entity.model_fields.items()
    if info.alias is not None
}
_TEXT_KEYS = frozenset(
    {"primaryEmail", "primary_email", "displayName", "display_name", "title"}
)


def _known_keys() -> frozenset[str]:
    return _TYPED_FIELDS | frozenset(_WIRE_TO_FIELD)
