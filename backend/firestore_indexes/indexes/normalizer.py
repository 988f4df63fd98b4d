"""Upgrade of legacy (v1beta1) index specifications to the current shape.

The legacy shape identified the collection with ``collectionId`` and used a
single ``mode`` per field. The current shape uses ``collectionGroup`` plus
``queryScope`` and separates ``order`` from ``arrayConfig``.

Normalization is best-effort and never validates: malformed input is carried
through so ``SpecValidator`` can report it with the offending key.
"""

from typing import Any, Dict, Optional, Union

from firestore_indexes.core.constants.firestore import LEGACY_ARRAY_CONTAINS_MODE
from firestore_indexes.core.logging import ContextualLogger
from firestore_indexes.core.logging import logger as default_logger
from firestore_indexes.schemas.enums import DEFAULT_QUERY_SCOPE, ArrayConfig


class NoOp:
    """Outcome of normalizing a document that has no ``indexes`` key.

    Distinct from an empty specification: callers must not treat it as
    "nothing to deploy".
    """

    _instance: Optional["NoOp"] = None

    def __new__(cls) -> "NoOp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoOp"


NOTHING_TO_NORMALIZE = NoOp()


class SpecNormalizer:
    """Translates legacy index entries into the current specification shape."""

    def __init__(self, logger: Optional[ContextualLogger] = None):
        """Initialize the normalizer.

        Args:
            logger: Optional contextual logger
        """
        self.logger = logger or default_logger.with_context(component="spec_normalizer")

    def normalize(self, spec: Any) -> Union[Dict[str, Any], NoOp]:
        """Normalize a raw specification document.

        Args:
            spec: Raw document with ``indexes`` and optional ``fieldOverrides``

        Returns:
            A new document in the current shape, or ``NOTHING_TO_NORMALIZE`` if
            the input has no ``indexes`` key. The input is never mutated.
        """
        if not isinstance(spec, dict) or spec.get("indexes") is None:
            return NOTHING_TO_NORMALIZE

        indexes = spec["indexes"]
        if not isinstance(indexes, list):
            # Leave it for the validator to reject
            return {"indexes": indexes, "fieldOverrides": spec.get("fieldOverrides") or []}

        return {
            "indexes": [self._normalize_index(index) for index in indexes],
            # Field overrides never had a legacy format
            "fieldOverrides": spec.get("fieldOverrides") or [],
        }

    def _normalize_index(self, index: Any) -> Any:
        if not isinstance(index, dict):
            return index

        result: Dict[str, Any] = {}
        collection_group = index.get("collectionGroup") or index.get("collectionId")
        if collection_group is not None:
            result["collectionGroup"] = collection_group
        result["queryScope"] = index.get("queryScope") or DEFAULT_QUERY_SCOPE.value

        fields = index.get("fields")
        if isinstance(fields, list):
            result["fields"] = [self._normalize_field(field) for field in fields]
        elif fields is not None:
            result["fields"] = fields
        return result

    def _normalize_field(self, field: Any) -> Any:
        if not isinstance(field, dict):
            return field

        result: Dict[str, Any] = {}
        if "fieldPath" in field:
            result["fieldPath"] = field["fieldPath"]

        mode = field.get("mode")
        explicit = {
            key: field[key] for key in ("order", "arrayConfig") if field.get(key) is not None
        }
        if mode is None:
            result.update(explicit)
            return result
        if explicit:
            # Ambiguous: keep every discriminator so the validator rejects the field
            return {**result, "mode": mode, **explicit}

        self.logger.debug(
            'The use of "mode" in indexes is deprecated, please update to "order" or "arrayConfig"',
            extra={"field_path": field.get("fieldPath")},
        )
        if mode == LEGACY_ARRAY_CONTAINS_MODE:
            result["arrayConfig"] = ArrayConfig.CONTAINS.value
        else:
            result["order"] = mode
        return result


def upgrade_legacy_spec(spec: Any) -> Union[Dict[str, Any], NoOp]:
    """Normalize a raw specification with a default ``SpecNormalizer``."""
    return SpecNormalizer().normalize(spec)
