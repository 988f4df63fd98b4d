"""Action dispatcher for concurrent create/patch execution.

Dispatches the mutating actions of a ``DeployPlan`` to the Firestore Admin API
concurrently. Each action touches a distinct index or field, so calls share no
state; a failure in one never cancels or rolls back the others.
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional

from firestore_indexes.core.config import settings
from firestore_indexes.core.exceptions import RemoteCallError
from firestore_indexes.core.logging import ContextualLogger
from firestore_indexes.core.logging import logger as default_logger
from firestore_indexes.indexes.actions import (
    CreateIndexAction,
    DeployAction,
    DeployPlan,
    PatchFieldAction,
)
from firestore_indexes.platform.http_client import FirestoreAdminClient


@dataclass
class DispatchOutcome:
    """Per-action results of a dispatch, in plan order."""

    succeeded: List[DeployAction]
    failures: List[RemoteCallError]


class ActionDispatcher:
    """Issues every mutating action of a plan and joins on all of them.

    Execution:
    1. One named task per action, bounded by a semaphore
    2. ``gather(..., return_exceptions=True)`` waits for every task
    3. Failures are collected and returned together, never raised mid-batch
    """

    def __init__(
        self,
        client: FirestoreAdminClient,
        max_concurrency: Optional[int] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize dispatcher.

        Args:
            client: Firestore Admin API client
            max_concurrency: In-flight call limit; defaults to settings
            logger: Optional contextual logger
        """
        self.client = client
        self.max_concurrency = max_concurrency or settings.MAX_CONCURRENT_REQUESTS
        self.logger = logger or default_logger.with_context(component="dispatcher")

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def dispatch(self, plan: DeployPlan) -> DispatchOutcome:
        """Dispatch every create and patch in the plan.

        Args:
            plan: Resolved deploy plan

        Returns:
            DispatchOutcome with the actions that succeeded and every failure
        """
        actions = plan.mutations
        if not actions:
            self.logger.debug("[Dispatcher] No mutations to dispatch")
            return DispatchOutcome(succeeded=[], failures=[])

        self.logger.debug(f"[Dispatcher] Dispatching {plan.summary()}")

        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [
            asyncio.create_task(
                self._dispatch_with_semaphore(semaphore, plan.project, action),
                name=f"{type(action).__name__}-{action.target}",
            )
            for action in actions
        ]

        results = await asyncio.gather(*tasks, return_exceptions=True)

        succeeded: List[DeployAction] = []
        failures: List[RemoteCallError] = []
        for action, result in zip(actions, results, strict=False):
            if isinstance(result, RemoteCallError):
                failures.append(result)
            elif isinstance(result, BaseException):
                failures.append(
                    RemoteCallError(self._operation(action), action.target, str(result))
                )
            else:
                succeeded.append(action)

        if failures:
            failure_msgs = [str(failure) for failure in failures]
            self.logger.error(f"[Dispatcher] {len(failures)} action(s) failed: {failure_msgs}")
        else:
            self.logger.debug("[Dispatcher] All actions completed successfully")

        return DispatchOutcome(succeeded=succeeded, failures=failures)

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    async def _dispatch_with_semaphore(
        self,
        semaphore: asyncio.Semaphore,
        project: str,
        action: DeployAction,
    ) -> None:
        async with semaphore:
            await self._dispatch_action(project, action)

    async def _dispatch_action(self, project: str, action: DeployAction) -> None:
        """Issue the API call for a single action."""
        if isinstance(action, CreateIndexAction):
            self.logger.debug(
                f"Creating new index: {action.spec.to_document()}",
                extra={"collection_group": action.spec.collection_group},
            )
            await self.client.create_index(project, action.spec)
        elif isinstance(action, PatchFieldAction):
            self.logger.debug(
                f"Updating field override: {action.spec.to_document()}",
                extra={"collection_group": action.spec.collection_group},
            )
            await self.client.patch_field(project, action.spec)
        else:
            raise TypeError(f"Unknown action type: {type(action).__name__}")

    @staticmethod
    def _operation(action: DeployAction) -> str:
        return "create_index" if isinstance(action, CreateIndexAction) else "patch_field"
