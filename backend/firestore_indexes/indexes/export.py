"""Export of live indexes into a specification document."""

from typing import Any, Dict, List, Optional, Sequence

from firestore_indexes.core.logging import ContextualLogger
from firestore_indexes.core.logging import logger as default_logger
from firestore_indexes.indexes.names import parse_field_name, parse_index_name
from firestore_indexes.schemas.firestore_api import ApiField, ApiIndex


def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def make_spec_from_live(
    indexes: Sequence[ApiIndex],
    fields: Optional[Sequence[ApiField]] = None,
    logger: Optional[ContextualLogger] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """Turn live indexes and field overrides into an index file document.

    The result is suitable for writing to ``firestore.indexes.json``; deploying
    it back to the same project issues no calls.

    Args:
        indexes: Live indexes, document-identity field already stripped
        fields: Live field overrides; treated as empty when omitted
        logger: Optional contextual logger

    Returns:
        Document with ``indexes`` and ``fieldOverrides`` keys

    Raises:
        ParseError: If a live resource name is malformed
    """
    logger = logger or default_logger.with_context(component="spec_export")

    indexes_json = [
        _drop_none(
            {
                "collectionGroup": parse_index_name(index.name).collection_group_id,
                "queryScope": index.query_scope,
                "fields": [
                    field.model_dump(by_alias=True, exclude_none=True) for field in index.fields
                ],
            }
        )
        for index in indexes
    ]

    if fields is None:
        logger.debug("No field overrides specified, using [].")
        fields = []

    fields_json = []
    for field in fields:
        parsed = parse_field_name(field.name)
        overrides = []
        for index in field.index_config.indexes:
            first = index.fields[0] if index.fields else None
            overrides.append(
                _drop_none(
                    {
                        "order": first.order if first else None,
                        "arrayConfig": first.array_config if first else None,
                        "queryScope": index.query_scope,
                    }
                )
            )
        fields_json.append(
            {
                "collectionGroup": parsed.collection_group_id,
                "fieldPath": parsed.field_path,
                "indexes": overrides,
            }
        )

    return {"indexes": indexes_json, "fieldOverrides": fields_json}
