"""Proposal service exception hierarchy."""
from typing import Any, Optional


class ProposalError(Exception):
    """Base class for proposal service errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ProposalNotFoundError(ProposalError):
    def __init__(self, proposal_id: str):
        super().__init__(
            f"Proposal {proposal_id} not found",
            error_code="ERR_PROPOSAL_404",
            details={"proposal_id": proposal_id},
        )


class ProposalAccessError(ProposalError):
    """Caller may not act on this proposal."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_PROPOSAL_403", details=details)


class ReportGenerationError(ProposalError):
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_REPORT_001", details=details)
