"""Functional equivalence between live resources and specification entries.

These comparisons decide whether a deploy issues a call at all, so repeated
deploys of an unchanged specification must find a match for every entry.
"""

from enum import Enum
from typing import Any, Iterable, Optional

from firestore_indexes.indexes.names import parse_field_name, parse_index_name
from firestore_indexes.schemas.firestore_api import ApiField, ApiIndex
from firestore_indexes.schemas.index_spec import FieldOverride, IndexSpec


def _value(value: Any) -> Optional[str]:
    if isinstance(value, Enum):
        return value.value
    return value


def index_matches_spec(index: ApiIndex, spec: IndexSpec) -> bool:
    """Determine if a live index and an index spec are functionally equivalent.

    Collection group, query scope and the ordered field list must all match;
    the same fields in a different order form a different index.

    Raises:
        ParseError: If the live index name is malformed
    """
    collection_group = parse_index_name(index.name).collection_group_id
    if collection_group != spec.collection_group:
        return False

    if _value(index.query_scope) != _value(spec.query_scope):
        return False

    if len(index.fields) != len(spec.fields):
        return False

    for live_field, spec_field in zip(index.fields, spec.fields):
        if live_field.field_path != spec_field.field_path:
            return False
        if _value(live_field.order) != _value(spec_field.order):
            return False
        if _value(live_field.array_config) != _value(spec_field.array_config):
            return False

    return True


def field_matches_spec(field: ApiField, spec: FieldOverride) -> bool:
    """Determine if a live field override and an override spec are equivalent.

    The set of enabled index modes is compared without regard to declaration
    order; each entry enables one mode independently.

    Raises:
        ParseError: If the live field name is malformed
    """
    parsed = parse_field_name(field.name)
    if parsed.collection_group_id != spec.collection_group:
        return False

    if parsed.field_path != spec.field_path:
        return False

    live_indexes = field.index_config.indexes
    if len(live_indexes) != len(spec.indexes):
        return False

    spec_modes = {index.mode for index in spec.indexes}
    return all(index.mode in spec_modes for index in live_indexes)


def find_matching_index(indexes: Iterable[ApiIndex], spec: IndexSpec) -> Optional[ApiIndex]:
    """Get the first live index equivalent to ``spec``, if any."""
    return next((index for index in indexes if index_matches_spec(index, spec)), None)


def find_matching_field(fields: Iterable[ApiField], spec: FieldOverride) -> Optional[ApiField]:
    """Get the first live field override equivalent to ``spec``, if any."""
    return next((field for field in fields if field_matches_spec(field, spec)), None)
