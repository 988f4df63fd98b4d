"""Index reconciliation.

Key Classes:
- SpecNormalizer: Upgrades legacy (v1beta1) entries to the current shape
- SpecValidator: Rejects malformed specification entries before deploy
- IndexReconciler: Diffs a specification against live config and applies it
- FirestoreIndexes: Caller-facing service bundling the above

Resource names are decoded with ``parse_index_name`` / ``parse_field_name``;
equivalence is decided by ``index_matches_spec`` / ``field_matches_spec``.
"""

from .actions import DeployPlan, ReconcileResult
from .export import make_spec_from_live
from .matcher import field_matches_spec, index_matches_spec
from .names import parse_field_name, parse_index_name
from .normalizer import NOTHING_TO_NORMALIZE, NoOp, SpecNormalizer, upgrade_legacy_spec
from .reconciler import IndexReconciler
from .service import FirestoreIndexes, prepare_indexes, resolve_deploy_targets
from .validator import SpecValidator, validate_spec

__all__ = [
    "DeployPlan",
    "ReconcileResult",
    "make_spec_from_live",
    "field_matches_spec",
    "index_matches_spec",
    "parse_field_name",
    "parse_index_name",
    "NOTHING_TO_NORMALIZE",
    "NoOp",
    "SpecNormalizer",
    "upgrade_legacy_spec",
    "IndexReconciler",
    "FirestoreIndexes",
    "prepare_indexes",
    "resolve_deploy_targets",
    "SpecValidator",
    "validate_spec",
]
