"""Entry points for preparing and deploying an index file.

``FirestoreIndexes`` is the surface used by callers (CLI, deploy pipelines):
it validates specifications, exports live configuration and runs deploys
against an injected ``FirestoreAdminClient``.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from firestore_indexes.core.exceptions import ValidationError
from firestore_indexes.core.logging import ContextualLogger
from firestore_indexes.core.logging import logger as default_logger
from firestore_indexes.indexes.actions import ReconcileResult
from firestore_indexes.indexes.export import make_spec_from_live
from firestore_indexes.indexes.formatting import log_field_overrides, log_indexes
from firestore_indexes.indexes.names import parse_field_name, parse_index_name
from firestore_indexes.indexes.reconciler import IndexReconciler
from firestore_indexes.indexes.validator import validate_spec
from firestore_indexes.platform.http_client import FirestoreAdminClient
from firestore_indexes.schemas.firestore_api import ApiField, ApiIndex
from firestore_indexes.schemas.index_spec import IndexFile
from firestore_indexes.schemas.resource_name import FieldName, IndexName

FIRESTORE_TARGET = "firestore"
INDEXES_TARGET = "firestore:indexes"
RULES_TARGET = "firestore:rules"


@dataclass(frozen=True)
class DeployTargets:
    """Which Firestore artifacts a deploy should touch."""

    indexes: bool
    rules: bool


@dataclass(frozen=True)
class PreparedIndexes:
    """An index file that was loaded and validated ahead of deploy."""

    name: str
    content: Dict[str, Any]


def resolve_deploy_targets(only: Optional[str]) -> DeployTargets:
    """Interpret a comma separated ``--only`` selector.

    Args:
        only: e.g. ``"firestore:indexes,functions"``; None selects everything

    Returns:
        DeployTargets flags for indexes and rules
    """
    if not only:
        return DeployTargets(indexes=True, rules=True)

    targets = {target.strip() for target in only.split(",")}
    everything = FIRESTORE_TARGET in targets
    return DeployTargets(
        indexes=everything or INDEXES_TARGET in targets,
        rules=everything or RULES_TARGET in targets,
    )


def prepare_indexes(path: Union[str, Path]) -> PreparedIndexes:
    """Load an index file and validate it before anything is deployed.

    Args:
        path: Path to the JSON index file

    Returns:
        PreparedIndexes with the file name and parsed content

    Raises:
        ValidationError: If the file is not valid JSON or an entry is invalid
    """
    path = Path(path)
    try:
        content = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Index file {path.name} is not valid JSON: {e}") from e

    validate_spec(content)
    return PreparedIndexes(name=path.name, content=content)


class FirestoreIndexes:
    """Validate, list, export and deploy Firestore indexes for a project."""

    def __init__(
        self,
        client: FirestoreAdminClient,
        max_concurrency: Optional[int] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the service.

        Args:
            client: Firestore Admin API client
            max_concurrency: In-flight create/patch limit; defaults to settings
            logger: Optional contextual logger
        """
        self.client = client
        self.logger = logger or default_logger.with_context(component="firestore_indexes")
        self.reconciler = IndexReconciler(
            client, max_concurrency=max_concurrency, logger=self.logger
        )

    @staticmethod
    def validate_spec(raw: Any) -> IndexFile:
        """Normalize and validate a raw index document."""
        return validate_spec(raw)

    @staticmethod
    def parse_index_name(name: Optional[str]) -> IndexName:
        """Parse an index resource name."""
        return parse_index_name(name)

    @staticmethod
    def parse_field_name(name: Optional[str]) -> FieldName:
        """Parse a field override resource name."""
        return parse_field_name(name)

    def make_spec_from_live(
        self,
        indexes: Sequence[ApiIndex],
        fields: Optional[Sequence[ApiField]] = None,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """Turn a live snapshot into an index file document."""
        return make_spec_from_live(indexes, fields, logger=self.logger)

    async def list_indexes(self, project: str) -> List[ApiIndex]:
        """List every composite index in the project."""
        return await self.client.list_indexes(project)

    async def list_field_overrides(self, project: str) -> List[ApiField]:
        """List every field override in the project."""
        return await self.client.list_field_overrides(project)

    async def export(self, project: str) -> Dict[str, List[Dict[str, Any]]]:
        """Fetch the live configuration of a project as an index file document."""
        indexes, fields = await self.reconciler.fetch_live(project)
        return self.make_spec_from_live(indexes, fields)

    async def show(self, project: str) -> None:
        """Log the live indexes and field overrides of a project, one per line."""
        indexes, fields = await self.reconciler.fetch_live(project)
        log_indexes(indexes, logger=self.logger)
        log_field_overrides(fields, logger=self.logger)

    async def reconcile(
        self,
        project: str,
        indexes: Optional[Sequence[Any]],
        field_overrides: Optional[Sequence[Any]] = None,
        dry_run: bool = False,
    ) -> ReconcileResult:
        """Deploy index entries and field overrides to the project.

        See ``IndexReconciler.reconcile``.
        """
        return await self.reconciler.reconcile(
            project, indexes, field_overrides, dry_run=dry_run
        )

    async def deploy(
        self, project: str, prepared: PreparedIndexes, dry_run: bool = False
    ) -> ReconcileResult:
        """Deploy a prepared index file to the project."""
        self.logger.info(f"Deploying indexes from {prepared.name}", extra={"project": project})
        return await self.reconcile(
            project,
            prepared.content.get("indexes"),
            prepared.content.get("fieldOverrides"),
            dry_run=dry_run,
        )
