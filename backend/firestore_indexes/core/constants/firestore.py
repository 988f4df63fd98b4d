"""Constants for Firestore index resources."""

import re

# Only the default database is addressable by the index API
DATABASE_ID = "(default)"

# projects/$PROJECT_ID/databases/(default)/collectionGroups/$COLLECTION_GROUP_ID/indexes/$INDEX_ID
INDEX_NAME_PATTERN = re.compile(
    r"projects/([^/]+?)/databases/\(default\)/collectionGroups/([^/]+?)/indexes/([^/]+)"
)

# projects/$PROJECT_ID/databases/(default)/collectionGroups/$COLLECTION_GROUP_ID/fields/$FIELD_ID
FIELD_NAME_PATTERN = re.compile(
    r"projects/([^/]+?)/databases/\(default\)/collectionGroups/([^/]+?)/fields/([^/]+)"
)

# Implicit trailing field present in every composite index
DOCUMENT_ID_FIELD_PATH = "__name__"

# Field record carrying the database-wide default index config
DEFAULT_FIELD_MARKER = "__default__"

# Wildcard collection group used by the list endpoints
ALL_COLLECTION_GROUPS = "-"

# Filter that excludes fields inheriting their config from the ancestor default
FIELD_OVERRIDES_FILTER = "indexConfig.usesAncestorConfig=false"

# Legacy `mode` value that maps to arrayConfig=CONTAINS
LEGACY_ARRAY_CONTAINS_MODE = "ARRAY_CONTAINS"
