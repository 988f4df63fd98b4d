"""Structured identifiers decoded from Firestore resource names."""

from pydantic import BaseModel, ConfigDict


class IndexName(BaseModel):
    """Identifiers of a composite index resource."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    collection_group_id: str
    index_id: str


class FieldName(BaseModel):
    """Identifiers of a field override resource."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    collection_group_id: str
    field_path: str
