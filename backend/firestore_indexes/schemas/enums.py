"""Enumerated values used by index specifications and the Firestore Admin API."""

from enum import Enum


class QueryScope(str, Enum):
    """Whether an index serves queries on one collection or a collection group."""

    COLLECTION = "COLLECTION"
    COLLECTION_GROUP = "COLLECTION_GROUP"


class Order(str, Enum):
    """Sort order of an indexed field."""

    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class ArrayConfig(str, Enum):
    """Array index mode, mutually exclusive with ``Order``."""

    CONTAINS = "CONTAINS"


class Mode(str, Enum):
    """Legacy v1beta1 per-field mode combining order and array config."""

    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"
    ARRAY_CONTAINS = "ARRAY_CONTAINS"


class State(str, Enum):
    """Lifecycle state reported for a live index."""

    STATE_UNSPECIFIED = "STATE_UNSPECIFIED"
    CREATING = "CREATING"
    READY = "READY"
    NEEDS_REPAIR = "NEEDS_REPAIR"


# Default scope filled in for entries that do not declare one
DEFAULT_QUERY_SCOPE = QueryScope.COLLECTION
