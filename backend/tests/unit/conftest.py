"""Unit test conftest for setting up test environment."""

import os

# Set environment variables before importing any firestore_indexes modules
# so Settings never picks up a developer's real credentials
os.environ.setdefault("FIRESTORE_INDEXES_FIRESTORE_API_ORIGIN", "https://firestore.test")
os.environ.setdefault("FIRESTORE_INDEXES_ACCESS_TOKEN", "test-token")
os.environ.setdefault("FIRESTORE_INDEXES_MAX_RETRIES", "3")
os.environ.setdefault("FIRESTORE_INDEXES_LOCAL_DEVELOPMENT", "true")
