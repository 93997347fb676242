"""Exception taxonomy for the prospect pipeline."""
from __future__ import annotations


class ProspectIntelError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgument(ProspectIntelError, ValueError):
    """Malformed caller input; raised before any external call."""


class OracleContractViolation(ProspectIntelError):
    """The judgment oracle replied with data that breaks its schema."""


class SchemaError(OracleContractViolation, ValueError):
    """A raw score payload is missing a field or holds a bad value."""


class OracleUnavailable(ProspectIntelError):
    """The oracle could not be reached or is not configured."""


class AcquisitionFailure(ProspectIntelError):
    """A single source/term failed to yield candidates."""

    def __init__(self, source: str, term: str, cause: BaseException | None = None):
        super().__init__(f"{source} failed for term {term!r}: {cause}")
        self.source = source
        self.term = term
        self.cause = cause


class CandidatePipelineFailure(ProspectIntelError):
    """One candidate's enrich/score/draft/persist sequence failed."""

    def __init__(self, company: str, cause: BaseException):
        super().__init__(f"{company or '<unnamed>'}: {cause}")
        self.company = company
        self.cause = cause


class StorageError(ProspectIntelError):
    """Persistence failed; callers surface this instead of swallowing it."""
