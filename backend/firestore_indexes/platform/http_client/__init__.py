"""HTTP client for the Firestore Admin API."""

from .firestore_client import FirestoreAdminClient, collection_group_path

__all__ = [
    "FirestoreAdminClient",
    "collection_group_path",
]
