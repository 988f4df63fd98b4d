"""Tests for specification validation.

Covers the per-entry checks of SpecValidator and the validate_spec pipeline
that normalizes, validates and builds the typed IndexFile.
"""

from unittest.mock import MagicMock

import pytest

from firestore_indexes.core.exceptions import ValidationError
from firestore_indexes.indexes.validator import SpecValidator, validate_spec
from firestore_indexes.schemas.enums import ArrayConfig, Order, QueryScope
from firestore_indexes.schemas.index_spec import IndexFile


@pytest.fixture
def validator():
    """Create a validator with a mock logger."""
    return SpecValidator(logger=MagicMock())


def _index(**overrides):
    index = {
        "collectionGroup": "posts",
        "queryScope": "COLLECTION",
        "fields": [{"fieldPath": "author", "order": "ASCENDING"}],
    }
    index.update(overrides)
    return index


# -----------------------------------------------------------------------------
# Index entries
# -----------------------------------------------------------------------------


def test_valid_index_passes(validator):
    """Test that a current-shape index entry is accepted."""
    validator.validate_index(_index())


def test_legacy_index_passes(validator):
    """Test that a legacy entry with collectionId and mode is accepted."""
    validator.validate_index(
        {"collectionId": "posts", "fields": [{"fieldPath": "author", "mode": "DESCENDING"}]}
    )


def test_index_requires_collection(validator):
    """Test that an entry with neither collectionGroup nor collectionId is rejected."""
    index = _index()
    del index["collectionGroup"]

    with pytest.raises(ValidationError, match="collectionGroup,collectionId") as exc_info:
        validator.validate_index(index)

    assert exc_info.value.entry is index


def test_collection_group_requires_query_scope(validator):
    """Test that collectionGroup without queryScope is rejected."""
    index = _index()
    del index["queryScope"]

    with pytest.raises(ValidationError) as exc_info:
        validator.validate_index(index)

    assert exc_info.value.key == "queryScope"


def test_invalid_query_scope(validator):
    """Test that an unknown queryScope is rejected."""
    with pytest.raises(ValidationError, match="queryScope"):
        validator.validate_index(_index(queryScope="DATABASE"))


@pytest.mark.parametrize("fields", [None, [], "author"])
def test_index_requires_non_empty_fields(validator, fields):
    """Test that fields must be a non-empty list."""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate_index(_index(fields=fields))

    assert exc_info.value.key == "fields"


def test_field_requires_field_path(validator):
    """Test that every field needs a fieldPath."""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate_index(_index(fields=[{"order": "ASCENDING"}]))

    assert exc_info.value.key == "fieldPath"


def test_field_requires_a_discriminator(validator):
    """Test that a field with no order, arrayConfig or mode is rejected."""
    with pytest.raises(ValidationError, match="order,arrayConfig,mode"):
        validator.validate_index(_index(fields=[{"fieldPath": "author"}]))


def test_field_rejects_order_and_array_config(validator):
    """Test that a field may not be both ordered and array-contains."""
    field = {"fieldPath": "tags", "order": "ASCENDING", "arrayConfig": "CONTAINS"}

    with pytest.raises(ValidationError, match="only one of") as exc_info:
        validator.validate_index(_index(fields=[field]))

    assert exc_info.value.key == "arrayConfig"


@pytest.mark.parametrize(
    "field",
    [
        {"fieldPath": "a", "order": "UP"},
        {"fieldPath": "a", "arrayConfig": "ANY"},
        {"fieldPath": "a", "mode": "SIDEWAYS"},
    ],
)
def test_field_rejects_unknown_enum_values(validator, field):
    """Test that order, arrayConfig and mode are checked against their enums."""
    with pytest.raises(ValidationError, match="must be one of"):
        validator.validate_index(_index(fields=[field]))


def test_mode_logs_deprecation(validator):
    """Test that legacy mode is accepted with a debug deprecation notice."""
    validator.validate_index(_index(fields=[{"fieldPath": "a", "mode": "ARRAY_CONTAINS"}]))

    validator.logger.debug.assert_called_once()
    assert "deprecated" in validator.logger.debug.call_args[0][0]


def test_index_must_be_object(validator):
    """Test that a non-dict index entry is rejected."""
    with pytest.raises(ValidationError, match="must be an object"):
        validator.validate_index("posts")


# -----------------------------------------------------------------------------
# Field override entries
# -----------------------------------------------------------------------------


def test_valid_field_override_passes(validator):
    """Test that a well-formed field override is accepted."""
    validator.validate_field_override(
        {
            "collectionGroup": "posts",
            "fieldPath": "tags",
            "indexes": [
                {"arrayConfig": "CONTAINS", "queryScope": "COLLECTION"},
                {"order": "ASCENDING"},
            ],
        }
    )


@pytest.mark.parametrize("missing", ["collectionGroup", "fieldPath", "indexes"])
def test_field_override_requires_keys(validator, missing):
    """Test that each required field override key is enforced."""
    field = {"collectionGroup": "posts", "fieldPath": "tags", "indexes": [{"order": "ASCENDING"}]}
    del field[missing]

    with pytest.raises(ValidationError) as exc_info:
        validator.validate_field_override(field)

    assert exc_info.value.key == missing


def test_field_override_index_requires_exactly_one_discriminator(validator):
    """Test that each override index sets exactly one of arrayConfig and order."""
    base = {"collectionGroup": "posts", "fieldPath": "tags"}

    with pytest.raises(ValidationError, match="at least one of"):
        validator.validate_field_override({**base, "indexes": [{"queryScope": "COLLECTION"}]})

    with pytest.raises(ValidationError, match="only one of"):
        validator.validate_field_override(
            {**base, "indexes": [{"order": "ASCENDING", "arrayConfig": "CONTAINS"}]}
        )


def test_field_override_may_disable_all_indexes(validator):
    """Test that an empty indexes list, which exempts the field, is accepted."""
    validator.validate_field_override(
        {"collectionGroup": "posts", "fieldPath": "body", "indexes": []}
    )


def test_field_rejects_mode_mixed_with_order(validator):
    """Test that a legacy mode next to an explicit order is ambiguous."""
    field = {"fieldPath": "a", "mode": "ASCENDING", "order": "DESCENDING"}

    with pytest.raises(ValidationError, match="only one of") as exc_info:
        validator.validate_index(_index(fields=[field]))

    assert exc_info.value.key == "mode"


@pytest.mark.parametrize(
    "field",
    [
        {"fieldPath": "a", "mode": "ASCENDING", "order": "DESCENDING"},
        {"fieldPath": "a", "mode": "ARRAY_CONTAINS", "order": "ASCENDING"},
        {"fieldPath": "a", "mode": "DESCENDING", "arrayConfig": "CONTAINS"},
    ],
)
def test_validate_spec_rejects_ambiguous_legacy_field(field):
    """Test that normalization does not silently pick one of two discriminators."""
    with pytest.raises(ValidationError, match="only one of"):
        validate_spec({"indexes": [{"collectionId": "c", "fields": [field]}]})


# -----------------------------------------------------------------------------
# Whole documents
# -----------------------------------------------------------------------------


def test_document_requires_indexes(validator):
    """Test that a document without an indexes list is rejected."""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({"fieldOverrides": []})

    assert exc_info.value.key == "indexes"


def test_document_reports_every_invalid_entry(validator):
    """Test that validation continues across entries and aggregates errors."""
    spec = {
        "indexes": [
            _index(),
            {"fields": [{"fieldPath": "a", "order": "ASCENDING"}]},
            _index(fields=[]),
        ],
        "fieldOverrides": [{"collectionGroup": "posts", "fieldPath": "tags", "indexes": "tags"}],
    }

    with pytest.raises(ValidationError) as exc_info:
        validator.validate(spec)

    assert len(exc_info.value.errors) == 3
    assert str(exc_info.value).startswith("3 invalid entries")


def test_single_invalid_entry_is_raised_directly(validator):
    """Test that a lone error is raised as-is instead of wrapped."""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({"indexes": [_index(queryScope=None)]})

    assert exc_info.value.errors == [exc_info.value]
    assert exc_info.value.key == "queryScope"


def test_validate_spec_builds_typed_model():
    """Test that validate_spec upgrades legacy entries and returns an IndexFile."""
    raw = {
        "indexes": [
            {"collectionId": "c", "fields": [{"fieldPath": "t", "mode": "ARRAY_CONTAINS"}]},
        ],
        "fieldOverrides": [
            {"collectionGroup": "c", "fieldPath": "f", "indexes": [{"order": "DESCENDING"}]}
        ],
    }

    spec = validate_spec(raw)

    assert isinstance(spec, IndexFile)
    index = spec.indexes[0]
    assert index.collection_group == "c"
    assert index.query_scope == QueryScope.COLLECTION
    assert index.fields[0].array_config == ArrayConfig.CONTAINS
    assert index.fields[0].order is None
    assert spec.field_overrides[0].indexes[0].order == Order.DESCENDING


def test_validate_spec_rejects_missing_indexes():
    """Test that a document with no indexes key is an error, not an empty deploy."""
    with pytest.raises(ValidationError) as exc_info:
        validate_spec({"fieldOverrides": []})

    assert exc_info.value.key == "indexes"


def test_validate_spec_accepts_empty_indexes():
    """Test that an explicitly empty index list is valid."""
    spec = validate_spec({"indexes": []})

    assert spec.indexes == []
    assert spec.field_overrides == []
