"""Declarative Firestore index deployment.

Reconciles an index specification document against the live indexes and field
overrides of a Firestore database, creating only what is missing.
"""

__version__ = "0.1.0"
