# proofing/errors.py

from __future__ import annotations


class ProofingError(Exception):
    """Base class for errors contained inside the proofing engine."""


class EngineUnavailable(ProofingError):
    """The grammar engine failed or timed out; callers degrade to pattern-only lints."""


class AIUnavailable(ProofingError):
    """The AI reviewer is absent. Expected; never surfaced as an error."""


class MalformedRule(ProofingError):
    def __init__(self, rule_id: str, cause: object):
        super().__init__(f"rule {rule_id!r} is malformed: {cause}")
        self.rule_id = rule_id
        self.cause = cause


class StaleResult(ProofingError):
    """A result was computed against a text snapshot that is no longer current."""


class StructuralEditFailure(ProofingError):
    """A fix could not be located or applied without corrupting the document."""
