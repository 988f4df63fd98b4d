"""Action dataclasses for index deploys.

Actions represent the operation to perform for one specification entry. A
``DeployPlan`` is computed in memory from a live snapshot before any call is
issued, so it can be inspected (dry run) without touching the project.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from firestore_indexes.schemas.firestore_api import ApiField, ApiIndex
from firestore_indexes.schemas.index_spec import FieldOverride, IndexSpec


@dataclass
class CreateIndexAction:
    """Index spec has no equivalent live index and must be created."""

    spec: IndexSpec

    @property
    def target(self) -> str:
        """Get a short description of the index."""
        columns = ",".join(f.field_path for f in self.spec.fields)
        return f"{self.spec.collection_group}({columns})"


@dataclass
class PatchFieldAction:
    """Field override differs from the live config and must be replaced."""

    spec: FieldOverride

    @property
    def target(self) -> str:
        """Get the collectionGroup.fieldPath of the override."""
        return f"{self.spec.collection_group}.{self.spec.field_path}"


@dataclass
class KeepAction:
    """Entry already has a functionally equivalent live resource."""

    spec: Union[IndexSpec, FieldOverride]
    existing: Optional[Union[ApiIndex, ApiField]] = None


DeployAction = Union[CreateIndexAction, PatchFieldAction]


@dataclass
class DeployPlan:
    """Container for the resolved actions of one deploy.

    Provides access to actions grouped by type and utility methods for
    checking plan state.
    """

    project: str
    creates: List[CreateIndexAction] = field(default_factory=list)
    patches: List[PatchFieldAction] = field(default_factory=list)
    keeps: List[KeepAction] = field(default_factory=list)

    @property
    def has_mutations(self) -> bool:
        """Check if the plan issues any create or patch call."""
        return bool(self.creates or self.patches)

    @property
    def mutations(self) -> List[DeployAction]:
        """Get every action that results in a remote call."""
        return [*self.creates, *self.patches]

    @property
    def mutation_count(self) -> int:
        """Get total count of mutating actions."""
        return len(self.creates) + len(self.patches)

    def summary(self) -> str:
        """Get a summary string of the plan."""
        return (
            f"{len(self.creates)} index creates, {len(self.patches)} field patches, "
            f"{len(self.keeps)} unchanged"
        )


@dataclass
class ReconcileResult:
    """Outcome of applying a ``DeployPlan``."""

    plan: DeployPlan
    created: int = 0
    patched: int = 0
    failed: int = 0
    dry_run: bool = False

    @property
    def skipped(self) -> int:
        """Get the number of entries that already matched."""
        return len(self.plan.keeps)

    def summary(self) -> str:
        """Get a summary string of the result."""
        prefix = "[dry run] " if self.dry_run else ""
        return (
            f"{prefix}{self.created} indexes created, {self.patched} field overrides patched, "
            f"{self.skipped} unchanged, {self.failed} failed"
        )
