"""Plain-text rendering of live indexes and field overrides."""

from typing import Iterable, Optional

from firestore_indexes.core.constants.firestore import DOCUMENT_ID_FIELD_PATH
from firestore_indexes.core.logging import ContextualLogger
from firestore_indexes.core.logging import logger as default_logger
from firestore_indexes.indexes.names import parse_field_name, parse_index_name
from firestore_indexes.schemas.firestore_api import ApiField, ApiIndex


def format_index(index: ApiIndex) -> str:
    """Render an index as ``[STATE] (group) -- (path,MODE) ...``."""
    result = f"[{index.state}] " if index.state else ""
    result += f"({parse_index_name(index.name).collection_group_id}) -- "

    for field in index.fields:
        if field.field_path == DOCUMENT_ID_FIELD_PATH:
            continue
        # Order for normal fields, arrayConfig for array fields
        result += f"({field.field_path},{field.mode}) "

    return result


def format_field_override(field: ApiField) -> str:
    """Render a field override as ``[group.path] -- (MODE) (MODE)``."""
    parsed = parse_field_name(field.name)
    result = f"[{parsed.collection_group_id}.{parsed.field_path}] --"
    for index in field.index_config.indexes:
        result += f" ({index.mode})"
    return result


def log_indexes(indexes: Iterable[ApiIndex], logger: Optional[ContextualLogger] = None) -> None:
    """Log one line per index at info level."""
    logger = logger or default_logger
    for index in indexes:
        logger.info(format_index(index))


def log_field_overrides(
    fields: Iterable[ApiField], logger: Optional[ContextualLogger] = None
) -> None:
    """Log one line per field override at info level."""
    logger = logger or default_logger
    for field in fields:
        logger.info(format_field_override(field))
