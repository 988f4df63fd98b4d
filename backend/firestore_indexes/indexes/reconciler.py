"""Reconciler for Firestore indexes and field overrides.

A deploy runs in four steps:
1. Normalize and validate the specification (no remote call on failure)
2. Fetch a snapshot of live indexes and field overrides, concurrently
3. Diff the specification against the snapshot into a ``DeployPlan``
4. Dispatch the plan's creates and patches and join on all of them

Reconciliation is additive: live resources missing from the specification are
left untouched.
"""

import asyncio
from typing import Any, List, Optional, Sequence, Tuple

from firestore_indexes.core.exceptions import ReconciliationError
from firestore_indexes.core.logging import ContextualLogger
from firestore_indexes.core.logging import logger as default_logger
from firestore_indexes.indexes.actions import (
    CreateIndexAction,
    DeployPlan,
    KeepAction,
    PatchFieldAction,
    ReconcileResult,
)
from firestore_indexes.indexes.dispatcher import ActionDispatcher
from firestore_indexes.indexes.matcher import find_matching_field, find_matching_index
from firestore_indexes.indexes.normalizer import SpecNormalizer
from firestore_indexes.indexes.validator import SpecValidator, validate_spec
from firestore_indexes.platform.http_client import FirestoreAdminClient
from firestore_indexes.schemas.firestore_api import ApiField, ApiIndex
from firestore_indexes.schemas.index_spec import IndexFile


class IndexReconciler:
    """Brings a project's indexes in line with a specification."""

    def __init__(
        self,
        client: FirestoreAdminClient,
        max_concurrency: Optional[int] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the reconciler.

        Args:
            client: Firestore Admin API client
            max_concurrency: In-flight create/patch limit; defaults to settings
            logger: Optional contextual logger
        """
        self.client = client
        self.logger = logger or default_logger.with_context(component="index_reconciler")
        self.normalizer = SpecNormalizer(logger=self.logger)
        self.validator = SpecValidator(logger=self.logger)
        self.dispatcher = ActionDispatcher(
            client, max_concurrency=max_concurrency, logger=self.logger
        )

    async def reconcile(
        self,
        project: str,
        indexes: Optional[Sequence[Any]],
        field_overrides: Optional[Sequence[Any]] = None,
        dry_run: bool = False,
    ) -> ReconcileResult:
        """Deploy index and field override specs to a project.

        Args:
            project: Firebase project ID
            indexes: Raw index entries, current or legacy shape
            field_overrides: Raw field override entries
            dry_run: Compute the plan without issuing any create/patch call

        Returns:
            ReconcileResult describing the plan and what was applied

        Raises:
            ValidationError: If the specification is invalid; nothing is deployed
            RemoteCallError: If listing the live configuration fails
            ReconciliationError: If any create/patch failed, after all have finished
        """
        logger = self.logger.with_context(project=project)

        spec = validate_spec(
            {"indexes": indexes, "fieldOverrides": field_overrides or []},
            normalizer=self.normalizer,
            validator=self.validator,
        )

        existing_indexes, existing_fields = await self.fetch_live(project)

        plan = self.plan(project, spec, existing_indexes, existing_fields)
        logger.info(f"Deploy plan: {plan.summary()}")

        if dry_run or not plan.has_mutations:
            return ReconcileResult(plan=plan, dry_run=dry_run)

        outcome = await self.dispatcher.dispatch(plan)
        result = ReconcileResult(
            plan=plan,
            created=sum(isinstance(a, CreateIndexAction) for a in outcome.succeeded),
            patched=sum(isinstance(a, PatchFieldAction) for a in outcome.succeeded),
            failed=len(outcome.failures),
        )
        logger.info(f"Deploy finished: {result.summary()}")

        if outcome.failures:
            raise ReconciliationError(outcome.failures, result)
        return result

    async def fetch_live(self, project: str) -> Tuple[List[ApiIndex], List[ApiField]]:
        """List live indexes and field overrides concurrently.

        Both listings are joined before returning or raising, so no call is left
        running against the client.

        Raises:
            RemoteCallError: The first listing failure, once both calls finished
        """
        results = await asyncio.gather(
            self.client.list_indexes(project),
            self.client.list_field_overrides(project),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        existing_indexes, existing_fields = results
        return existing_indexes, existing_fields

    def plan(
        self,
        project: str,
        spec: IndexFile,
        existing_indexes: List[ApiIndex],
        existing_fields: List[ApiField],
    ) -> DeployPlan:
        """Diff a validated specification against a live snapshot.

        Pure and synchronous; the snapshot is not re-fetched.

        Args:
            project: Firebase project ID
            spec: Validated specification
            existing_indexes: Live indexes of the project
            existing_fields: Live field overrides of the project

        Returns:
            DeployPlan with one action per specification entry

        Raises:
            ParseError: If a live resource name is malformed
        """
        plan = DeployPlan(project=project)

        for index in spec.indexes:
            match = find_matching_index(existing_indexes, index)
            if match is not None:
                self.logger.debug(f"Skipping existing index: {index.to_document()}")
                plan.keeps.append(KeepAction(spec=index, existing=match))
            else:
                plan.creates.append(CreateIndexAction(spec=index))

        for field in spec.field_overrides:
            match = find_matching_field(existing_fields, field)
            if match is not None:
                self.logger.debug(f"Skipping existing field override: {field.to_document()}")
                plan.keeps.append(KeepAction(spec=field, existing=match))
            else:
                plan.patches.append(PatchFieldAction(spec=field))

        return plan
