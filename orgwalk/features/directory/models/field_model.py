"""Field schema models.

The directory describes every person attribute with a field descriptor. The
collected descriptors form a Schema, an immutable snapshot that the schema
cache replaces as a whole on refresh.
"""

from pydantic import BaseModel, ConfigDict, Field


class FieldDescriptor(BaseModel):
    """Describes one attribute of a person record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    object_key: str = Field(
        ..., alias="objectKey", description="Attribute key (e.g., 'department')"
    )
    name: str = Field(default="", description="Human readable name")
    type: str = Field(default="string", description="Declared type")
    filterable: bool = Field(
        default=False, description="Usable as an equality/range filter"
    )
    searchable: bool = Field(
        default=False, description="Participates in free-text search"
    )


class Schema(BaseModel):
    """Immutable snapshot of the field descriptors of an organization."""

    model_config = ConfigDict(frozen=True)

    fields: tuple[FieldDescriptor, ...] = Field(default_factory=tuple)
    fetched_at: float = Field(
        default=0.0, description="Clock reading when the snapshot was fetched"
    )

    def get(self, object_key: str) -> FieldDescriptor | None:
        """Return the descriptor for a key, if the schema declares it."""
        for descriptor in self.fields:
            if descriptor.object_key == object_key:
                return descriptor
        return None

    def filterable_keys(self) -> set[str]:
        return {f.object_key for f in self.fields if f.filterable}

    def searchable_keys(self) -> set[str]:
        return {f.object_key for f in self.fields if f.searchable}

    def keys(self) -> list[str]:
        return [f.object_key for f in self.fields]
