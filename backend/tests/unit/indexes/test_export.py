"""Tests for exporting live configuration as an index file document."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from firestore_indexes.core.exceptions import ParseError
from firestore_indexes.indexes.export import make_spec_from_live
from firestore_indexes.indexes.reconciler import IndexReconciler
from firestore_indexes.schemas.firestore_api import ApiField, ApiIndex

CG_PATH = "projects/p1/databases/(default)/collectionGroups"


@pytest.fixture
def live_indexes():
    """Create live indexes as the client returns them."""
    return [
        ApiIndex.model_validate(
            {
                "name": f"{CG_PATH}/posts/indexes/a1",
                "state": "READY",
                "queryScope": "COLLECTION",
                "fields": [
                    {"fieldPath": "author", "order": "ASCENDING"},
                    {"fieldPath": "created", "order": "DESCENDING"},
                ],
            }
        ),
        ApiIndex.model_validate(
            {
                "name": f"{CG_PATH}/comments/indexes/b2",
                "state": "CREATING",
                "queryScope": "COLLECTION_GROUP",
                "fields": [{"fieldPath": "tags", "arrayConfig": "CONTAINS"}],
            }
        ),
    ]


@pytest.fixture
def live_fields():
    """Create a live field override with two single-field indexes."""
    return [
        ApiField.model_validate(
            {
                "name": f"{CG_PATH}/posts/fields/title",
                "indexConfig": {
                    "indexes": [
                        {
                            "queryScope": "COLLECTION",
                            "fields": [{"fieldPath": "title", "order": "ASCENDING"}],
                        },
                        {
                            "queryScope": "COLLECTION",
                            "fields": [{"fieldPath": "title", "arrayConfig": "CONTAINS"}],
                        },
                    ]
                },
            }
        )
    ]


def test_export_indexes(live_indexes, live_fields):
    """Test the exported document shape."""
    spec = make_spec_from_live(live_indexes, live_fields, logger=MagicMock())

    assert spec["indexes"] == [
        {
            "collectionGroup": "posts",
            "queryScope": "COLLECTION",
            "fields": [
                {"fieldPath": "author", "order": "ASCENDING"},
                {"fieldPath": "created", "order": "DESCENDING"},
            ],
        },
        {
            "collectionGroup": "comments",
            "queryScope": "COLLECTION_GROUP",
            "fields": [{"fieldPath": "tags", "arrayConfig": "CONTAINS"}],
        },
    ]
    assert spec["fieldOverrides"] == [
        {
            "collectionGroup": "posts",
            "fieldPath": "title",
            "indexes": [
                {"order": "ASCENDING", "queryScope": "COLLECTION"},
                {"arrayConfig": "CONTAINS", "queryScope": "COLLECTION"},
            ],
        }
    ]


def test_export_without_fields_uses_empty_list(live_indexes):
    """Test that omitted field overrides export as an empty list."""
    logger = MagicMock()

    spec = make_spec_from_live(live_indexes, logger=logger)

    assert spec["fieldOverrides"] == []
    logger.debug.assert_called_once_with("No field overrides specified, using [].")


def test_export_empty_project():
    """Test that an empty snapshot exports an empty, deployable document."""
    assert make_spec_from_live([], []) == {"indexes": [], "fieldOverrides": []}


def test_export_rejects_malformed_name():
    """Test that a bad live index name raises instead of exporting partial data."""
    index = ApiIndex.model_validate({"name": "bad", "fields": []})

    with pytest.raises(ParseError):
        make_spec_from_live([index], [])


@pytest.mark.asyncio
async def test_exported_spec_deploys_as_noop(live_indexes, live_fields):
    """Test that deploying an export back to the same snapshot issues no calls."""
    client = MagicMock()
    client.list_indexes = AsyncMock(return_value=live_indexes)
    client.list_field_overrides = AsyncMock(return_value=live_fields)
    client.create_index = AsyncMock()
    client.patch_field = AsyncMock()
    reconciler = IndexReconciler(client, logger=MagicMock())

    spec = make_spec_from_live(live_indexes, live_fields)
    result = await reconciler.reconcile("p1", spec["indexes"], spec["fieldOverrides"])

    client.create_index.assert_not_awaited()
    client.patch_field.assert_not_awaited()
    assert result.skipped == 3


@pytest.mark.asyncio
async def test_exempted_field_round_trips(live_indexes):
    """Test that a field with every single-field index disabled deploys back as a no-op."""
    exempted = ApiField.model_validate(
        {"name": f"{CG_PATH}/posts/fields/body", "indexConfig": {"indexes": []}}
    )
    client = MagicMock()
    client.list_indexes = AsyncMock(return_value=live_indexes)
    client.list_field_overrides = AsyncMock(return_value=[exempted])
    client.create_index = AsyncMock()
    client.patch_field = AsyncMock()
    reconciler = IndexReconciler(client, logger=MagicMock())

    spec = make_spec_from_live(live_indexes, [exempted])
    result = await reconciler.reconcile("p1", spec["indexes"], spec["fieldOverrides"])

    assert spec["fieldOverrides"] == [
        {"collectionGroup": "posts", "fieldPath": "body", "indexes": []}
    ]
    client.create_index.assert_not_awaited()
    client.patch_field.assert_not_awaited()
    assert result.skipped == 3
