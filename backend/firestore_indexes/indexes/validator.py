"""Validation of index specification documents.

Every entry is checked before anything is sent to the API. Within one entry the
first violation wins, because later checks assume the earlier keys exist; across
entries validation keeps going so that one run reports every bad entry.
"""

import json
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

import pydantic

from firestore_indexes.core.exceptions import ValidationError
from firestore_indexes.core.logging import ContextualLogger
from firestore_indexes.core.logging import logger as default_logger
from firestore_indexes.indexes.normalizer import NoOp, SpecNormalizer
from firestore_indexes.schemas.enums import ArrayConfig, Mode, Order, QueryScope
from firestore_indexes.schemas.index_spec import IndexFile


def _describe(obj: Any) -> str:
    return json.dumps(obj, default=str, sort_keys=True)


def _present(obj: Dict[str, Any], key: str) -> bool:
    value = obj.get(key)
    return value is not None and value != ""


def _values(enum_cls: Type[Enum]) -> List[str]:
    return [member.value for member in enum_cls]


def assert_has(obj: Any, key: str) -> None:
    """Require ``key`` to be present and non-empty on ``obj``."""
    if not isinstance(obj, dict) or not _present(obj, key):
        raise ValidationError(f'Must contain "{key}": {_describe(obj)}', key=key, entry=obj)


def assert_has_one_of(obj: Dict[str, Any], keys: Sequence[str]) -> None:
    """Require at least one of ``keys`` to be present on ``obj``."""
    if not any(_present(obj, key) for key in keys):
        raise ValidationError(
            f'Must contain at least one of "{",".join(keys)}": {_describe(obj)}',
            key=keys[0],
            entry=obj,
        )


def assert_at_most_one_of(obj: Dict[str, Any], keys: Sequence[str]) -> None:
    """Reject ``obj`` if more than one of ``keys`` is present."""
    present = [key for key in keys if _present(obj, key)]
    if len(present) > 1:
        raise ValidationError(
            f'Must contain only one of "{",".join(keys)}": {_describe(obj)}',
            key=present[1],
            entry=obj,
        )


def assert_enum(obj: Dict[str, Any], key: str, valid: Iterable[str]) -> None:
    """Require ``obj[key]`` to be one of ``valid``."""
    valid = list(valid)
    if obj.get(key) not in valid:
        raise ValidationError(
            f'Field "{key}" must be one of {", ".join(valid)}: {_describe(obj)}',
            key=key,
            entry=obj,
        )


def assert_type(obj: Dict[str, Any], key: str, expected: type, non_empty: bool = False) -> None:
    """Require ``obj[key]`` to be an instance of ``expected``."""
    value = obj.get(key)
    if not isinstance(value, expected):
        raise ValidationError(
            f'Field "{key}" must be of type {expected.__name__}: {_describe(obj)}',
            key=key,
            entry=obj,
        )
    if non_empty and len(value) == 0:
        raise ValidationError(f'Field "{key}" must not be empty: {_describe(obj)}', key=key, entry=obj)


class SpecValidator:
    """Checks that a specification document is safe to deploy."""

    def __init__(self, logger: Optional[ContextualLogger] = None):
        """Initialize the validator.

        Args:
            logger: Optional contextual logger
        """
        self.logger = logger or default_logger.with_context(component="spec_validator")

    def validate(self, spec: Any) -> None:
        """Validate a whole document.

        Args:
            spec: Document with an ``indexes`` list and optional ``fieldOverrides``

        Raises:
            ValidationError: With every invalid entry in ``errors``
        """
        assert_has(spec, "indexes")
        assert_type(spec, "indexes", list)

        errors: List[ValidationError] = []
        for index in spec["indexes"]:
            self._collect(errors, self.validate_index, index)

        if spec.get("fieldOverrides"):
            assert_type(spec, "fieldOverrides", list)
            for field in spec["fieldOverrides"]:
                self._collect(errors, self.validate_field_override, field)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            first = errors[0]
            message = "\n".join(str(error) for error in errors)
            raise ValidationError(
                f"{len(errors)} invalid entries:\n{message}",
                key=first.key,
                entry=first.entry,
                errors=errors,
            )

    @staticmethod
    def _collect(errors: List[ValidationError], check, entry: Any) -> None:
        try:
            check(entry)
        except ValidationError as e:
            errors.append(e)

    def validate_index(self, index: Any) -> None:
        """Validate a single composite index entry.

        Raises:
            ValidationError: On the first violation found in the entry
        """
        if not isinstance(index, dict):
            raise ValidationError(f"Index entry must be an object: {_describe(index)}", entry=index)

        assert_has_one_of(index, ["collectionGroup", "collectionId"])

        # v1beta2 pairs "collectionGroup" with "queryScope"; v1beta1 only had "collectionId"
        if _present(index, "collectionGroup"):
            assert_type(index, "collectionGroup", str)
            assert_has(index, "queryScope")
            assert_enum(index, "queryScope", _values(QueryScope))

        assert_has(index, "fields")
        assert_type(index, "fields", list, non_empty=True)

        for field in index["fields"]:
            self._validate_index_field(field)

    def _validate_index_field(self, field: Any) -> None:
        assert_has(field, "fieldPath")
        assert_type(field, "fieldPath", str)
        assert_has_one_of(field, ["order", "arrayConfig", "mode"])
        assert_at_most_one_of(field, ["order", "arrayConfig", "mode"])

        if _present(field, "mode"):
            # Only kept for compatibility with the v1beta1 indexes API
            self.logger.debug(
                'The use of "mode" in indexes is deprecated, '
                'please update to "order" or "arrayConfig"',
                extra={"field_path": field["fieldPath"]},
            )
            assert_enum(field, "mode", _values(Mode))

        if _present(field, "order"):
            assert_enum(field, "order", _values(Order))

        if _present(field, "arrayConfig"):
            assert_enum(field, "arrayConfig", _values(ArrayConfig))

    def validate_field_override(self, field: Any) -> None:
        """Validate a single field override entry.

        Raises:
            ValidationError: On the first violation found in the entry
        """
        assert_has(field, "collectionGroup")
        assert_type(field, "collectionGroup", str)
        assert_has(field, "fieldPath")
        assert_type(field, "fieldPath", str)
        # An empty list is valid: it turns off every single-field index of the field
        assert_type(field, "indexes", list)

        for index in field["indexes"]:
            if not isinstance(index, dict):
                raise ValidationError(
                    f"Field override index must be an object: {_describe(index)}", entry=field
                )
            assert_has_one_of(index, ["arrayConfig", "order"])
            assert_at_most_one_of(index, ["arrayConfig", "order"])

            if _present(index, "arrayConfig"):
                assert_enum(index, "arrayConfig", _values(ArrayConfig))

            if _present(index, "order"):
                assert_enum(index, "order", _values(Order))

            if _present(index, "queryScope"):
                assert_enum(index, "queryScope", _values(QueryScope))


def validate_spec(
    raw: Any,
    normalizer: Optional[SpecNormalizer] = None,
    validator: Optional[SpecValidator] = None,
) -> IndexFile:
    """Normalize and validate a raw document into a typed ``IndexFile``.

    Args:
        raw: Document as loaded from the index file
        normalizer: Normalizer to use, defaults to a new ``SpecNormalizer``
        validator: Validator to use, defaults to a new ``SpecValidator``

    Returns:
        The validated, immutable specification

    Raises:
        ValidationError: If the document, or any entry in it, is invalid
    """
    normalizer = normalizer or SpecNormalizer()
    validator = validator or SpecValidator()

    spec = normalizer.normalize(raw)
    if isinstance(spec, NoOp):
        # Surfaces the missing "indexes" key with the raw input attached
        validator.validate(raw)
        raise ValidationError(f'Must contain "indexes": {_describe(raw)}', key="indexes", entry=raw)

    validator.validate(spec)
    try:
        return IndexFile.model_validate(spec)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid index specification: {e}", entry=spec) from e
