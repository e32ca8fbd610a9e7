"""
Error taxonomy for the scan engine.

CatalogUnavailable and AdvisorError are recovered inside the engine;
InvalidRequest is the only error a caller is expected to see.
"""
from typing import Optional


class HalalScanError(Exception):
    """Base class for all engine errors."""


class CatalogUnavailable(HalalScanError):
    """The static product catalog could not be fetched or parsed."""


class InvalidRequest(HalalScanError):
    """Request rejected before any network call (missing input or credential)."""


class AdvisorError(HalalScanError):
    kind = "unknown"

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message or self.kind)
        self.status_code = status_code


class AdvisorUnauthorized(AdvisorError):
    kind = "unauthorized"


class AdvisorUnreachable(AdvisorError):
    kind = "unreachable"


class AdvisorRateLimited(AdvisorError):
    kind = "rate_limited"


class AdvisorUnknownError(AdvisorError):
    kind = "unknown"
