"""FirestoreAdminClient - HTTP client for the Firestore index admin API.

Wraps an ``httpx.AsyncClient`` and exposes the four calls reconciliation needs:
listing indexes, listing field overrides, creating an index and replacing a
field's index config. Transient failures are retried with tenacity; anything
that still fails surfaces as ``RemoteCallError``.
"""

from typing import Any, Dict, List, Optional

import httpx
from tenacity import AsyncRetrying, stop_after_attempt

from firestore_indexes.core.config import settings
from firestore_indexes.core.constants.firestore import (
    ALL_COLLECTION_GROUPS,
    DATABASE_ID,
    DEFAULT_FIELD_MARKER,
    DOCUMENT_ID_FIELD_PATH,
    FIELD_OVERRIDES_FILTER,
)
from firestore_indexes.core.exceptions import RemoteCallError
from firestore_indexes.core.logging import ContextualLogger
from firestore_indexes.core.logging import logger as default_logger
from firestore_indexes.platform.http_client.retry_helpers import (
    retry_if_transient,
    wait_retry_after_with_backoff,
)
from firestore_indexes.schemas.enums import QueryScope
from firestore_indexes.schemas.firestore_api import ApiField, ApiIndex
from firestore_indexes.schemas.index_spec import FieldOverride, IndexSpec


def collection_group_path(project: str, collection_group: str) -> str:
    """Get the resource path of a collection group in the default database."""
    return f"projects/{project}/databases/{DATABASE_ID}/collectionGroups/{collection_group}"


class FirestoreAdminClient:
    """Async client for the Firestore Admin index endpoints.

    The client can own its ``httpx.AsyncClient`` (created from settings) or
    wrap one supplied by the caller, e.g. one already carrying auth.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        max_retries: Optional[int] = None,
        retry_wait=wait_retry_after_with_backoff,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the client.

        Args:
            http_client: Client to send requests with; created from settings if omitted
            access_token: Bearer token; defaults to ``settings.ACCESS_TOKEN``
            base_url: Versioned API root; defaults to ``settings.api_base_url``
            max_retries: Attempts per request; defaults to ``settings.MAX_RETRIES``
            retry_wait: tenacity wait strategy between attempts
            logger: Optional contextual logger
        """
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT)
        self._access_token = access_token if access_token is not None else settings.ACCESS_TOKEN
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._max_retries = max_retries or settings.MAX_RETRIES
        self._retry_wait = retry_wait
        self.logger = logger or default_logger.with_context(component="firestore_client")

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    async def list_indexes(self, project: str) -> List[ApiIndex]:
        """List every composite index in a project.

        The implicit document-identity field is stripped from each index since
        it is present in all of them.

        Args:
            project: Firebase project ID

        Returns:
            Live indexes across all collection groups

        Raises:
            RemoteCallError: If the API call fails
        """
        path = f"{collection_group_path(project, ALL_COLLECTION_GROUPS)}/indexes"
        raw_indexes = await self._list_all("list_indexes", path, "indexes")

        indexes = []
        for raw in raw_indexes:
            fields = [
                field
                for field in raw.get("fields") or []
                if field.get("fieldPath") != DOCUMENT_ID_FIELD_PATH
            ]
            indexes.append(ApiIndex.model_validate({**raw, "fields": fields}))

        self.logger.debug(f"Listed {len(indexes)} indexes", extra={"project": project})
        return indexes

    async def list_field_overrides(self, project: str) -> List[ApiField]:
        """List every field override in a project.

        Fields that inherit their config from an ancestor are filtered by the
        API; the database-wide default record is dropped here.

        Args:
            project: Firebase project ID

        Returns:
            Live field overrides across all collection groups

        Raises:
            RemoteCallError: If the API call fails
        """
        path = f"{collection_group_path(project, ALL_COLLECTION_GROUPS)}/fields"
        raw_fields = await self._list_all(
            "list_field_overrides", path, "fields", params={"filter": FIELD_OVERRIDES_FILTER}
        )

        fields = [
            ApiField.model_validate(raw)
            for raw in raw_fields
            if DEFAULT_FIELD_MARKER not in (raw.get("name") or "")
        ]

        self.logger.debug(f"Listed {len(fields)} field overrides", extra={"project": project})
        return fields

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_index(self, project: str, index: IndexSpec) -> Dict[str, Any]:
        """Create a new composite index.

        Args:
            project: Firebase project ID
            index: Validated index spec

        Returns:
            The long-running operation returned by the API

        Raises:
            RemoteCallError: If the API call fails
        """
        path = f"{collection_group_path(project, index.collection_group)}/indexes"
        body = {
            "fields": [field.to_document() for field in index.fields],
            "queryScope": index.query_scope.value,
        }
        return await self._request_json("create_index", "POST", path, json=body)

    async def patch_field(self, project: str, field: FieldOverride) -> Dict[str, Any]:
        """Replace the whole index config of one field.

        Every index in the replacement is scoped to the collection.

        Args:
            project: Firebase project ID
            field: Validated field override spec

        Returns:
            The long-running operation returned by the API

        Raises:
            RemoteCallError: If the API call fails
        """
        path = f"{collection_group_path(project, field.collection_group)}/fields/{field.field_path}"
        indexes = []
        for index in field.indexes:
            descriptor: Dict[str, Any] = {"fieldPath": field.field_path}
            if index.order is not None:
                descriptor["order"] = index.order.value
            if index.array_config is not None:
                descriptor["arrayConfig"] = index.array_config.value
            indexes.append({"queryScope": QueryScope.COLLECTION.value, "fields": [descriptor]})

        body = {"indexConfig": {"indexes": indexes}}
        return await self._request_json("patch_field", "PATCH", path, json=body)

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    async def _list_all(
        self,
        operation: str,
        path: str,
        key: str,
        params: Optional[Dict[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        """Follow nextPageToken until every page of a list call is read."""
        items: List[Dict[str, Any]] = []
        page_params = dict(params or {})
        while True:
            body = await self._request_json(operation, "GET", path, params=page_params)
            items.extend(body.get(key) or [])
            token = body.get("nextPageToken")
            if not token:
                return items
            page_params["pageToken"] = token

    async def _request_json(
        self,
        operation: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """Send a request with retries and decode the JSON body.

        Raises:
            RemoteCallError: If the request fails after retries
        """
        url = f"{self._base_url}/{path}"
        headers = {}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries),
                retry=retry_if_transient,
                wait=self._retry_wait,
                reraise=True,
            ):
                with attempt:
                    response = await self._client.request(method, url, headers=headers, **kwargs)
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = self._error_message(e.response)
            self.logger.error(
                f"HTTP {e.response.status_code} from Firestore API for {method} {path}: {message}"
            )
            raise RemoteCallError(operation, path, message, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            self.logger.error(f"Request to Firestore API failed for {method} {path}: {e}")
            raise RemoteCallError(operation, path, str(e) or e.__class__.__name__) from e

        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the API's error message, falling back to the raw body."""
        try:
            error = response.json().get("error") or {}
            if isinstance(error, dict) and error.get("message"):
                return error["message"]
        except ValueError:
            pass
        return response.text[:200] or response.reason_phrase

    # Context manager support
    async def __aenter__(self) -> "FirestoreAdminClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
