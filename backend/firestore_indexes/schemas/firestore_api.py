"""Schemas for live resources returned by the Firestore Admin API.

Only the fields read during reconciliation are modelled; anything else in the
response is ignored.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ApiIndexField(_ApiModel):
    """A field descriptor inside a live index."""

    field_path: str = Field(..., alias="fieldPath")
    order: Optional[str] = None
    array_config: Optional[str] = Field(None, alias="arrayConfig")

    @property
    def mode(self) -> Optional[str]:
        """Get the order if set, else the array config."""
        return self.order or self.array_config


class ApiIndex(_ApiModel):
    """A composite index as reported by the API.

    ``fields`` never includes the implicit document-identity field; the client
    strips it when listing.
    """

    name: str
    state: Optional[str] = None
    query_scope: Optional[str] = Field(None, alias="queryScope")
    fields: List[ApiIndexField] = Field(default_factory=list)


class ApiFieldIndex(_ApiModel):
    """A single-field index inside a field's index config."""

    query_scope: Optional[str] = Field(None, alias="queryScope")
    state: Optional[str] = None
    fields: List[ApiIndexField] = Field(default_factory=list)

    @property
    def mode(self) -> Optional[str]:
        """Get the discriminator of the first field descriptor."""
        if not self.fields:
            return None
        return self.fields[0].mode


class ApiIndexConfig(_ApiModel):
    """Index configuration of a field."""

    indexes: List[ApiFieldIndex] = Field(default_factory=list)
    uses_ancestor_config: Optional[bool] = Field(None, alias="usesAncestorConfig")
    ancestor_field: Optional[str] = Field(None, alias="ancestorField")


class ApiField(_ApiModel):
    """A field override as reported by the API."""

    name: str
    index_config: ApiIndexConfig = Field(default_factory=ApiIndexConfig, alias="indexConfig")
