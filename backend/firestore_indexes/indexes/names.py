"""Parsing of Firestore index and field resource names."""

import re
from typing import Optional, Tuple

from firestore_indexes.core.constants.firestore import FIELD_NAME_PATTERN, INDEX_NAME_PATTERN
from firestore_indexes.core.exceptions import ParseError
from firestore_indexes.schemas.resource_name import FieldName, IndexName


def _match_name(name: Optional[str], pattern: re.Pattern, kind: str) -> Tuple[str, str, str]:
    if not name:
        raise ParseError(f"Cannot parse undefined {kind} name.", name=name)

    match = pattern.search(name)
    if match is None or len(match.groups()) < 3:
        raise ParseError(f"Error parsing {kind} name: {name}", name=name)

    project_id, collection_group_id, leaf = match.groups()
    return project_id, collection_group_id, leaf


def parse_index_name(name: Optional[str]) -> IndexName:
    """Parse an index resource name into its identifiers.

    Args:
        name: e.g. ``projects/p1/databases/(default)/collectionGroups/cg1/indexes/idx1``

    Returns:
        IndexName with project, collection group and index IDs

    Raises:
        ParseError: If the name is empty or does not match the index pattern
    """
    project_id, collection_group_id, index_id = _match_name(name, INDEX_NAME_PATTERN, "index")
    return IndexName(
        project_id=project_id,
        collection_group_id=collection_group_id,
        index_id=index_id,
    )


def parse_field_name(name: Optional[str]) -> FieldName:
    """Parse a field override resource name into its identifiers.

    Args:
        name: e.g. ``projects/p1/databases/(default)/collectionGroups/cg1/fields/tags``

    Returns:
        FieldName with project, collection group and field path

    Raises:
        ParseError: If the name is empty or does not match the field pattern
    """
    project_id, collection_group_id, field_path = _match_name(name, FIELD_NAME_PATTERN, "field")
    return FieldName(
        project_id=project_id,
        collection_group_id=collection_group_id,
        field_path=field_path,
    )
