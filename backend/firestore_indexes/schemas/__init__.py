"""Schemas for index specifications and live Firestore resources."""

from .enums import DEFAULT_QUERY_SCOPE, ArrayConfig, Mode, Order, QueryScope, State
from .firestore_api import ApiField, ApiFieldIndex, ApiIndex, ApiIndexConfig, ApiIndexField
from .index_spec import FieldOverride, FieldOverrideIndex, FieldSpec, IndexFile, IndexSpec
from .resource_name import FieldName, IndexName

__all__ = [
    "DEFAULT_QUERY_SCOPE",
    "ArrayConfig",
    "Mode",
    "Order",
    "QueryScope",
    "State",
    "ApiField",
    "ApiFieldIndex",
    "ApiIndex",
    "ApiIndexConfig",
    "ApiIndexField",
    "FieldOverride",
    "FieldOverrideIndex",
    "FieldSpec",
    "IndexFile",
    "IndexSpec",
    "FieldName",
    "IndexName",
]
