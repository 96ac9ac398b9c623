"""
Error taxonomy for the vRPA Manager

API handlers translate these into HTTP responses in ``vrpa.main``.
"""

from typing import Dict, Optional


class VRPAError(Exception):
    """Base class for all domain errors"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(VRPAError):
    """Referenced device, team member or user does not exist"""

    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationFailure(VRPAError):
    """Request rejected before any state was changed.

    ``errors`` maps field names to human readable messages.
    """

    status_code = 422

    def __init__(self, errors: Dict[str, str], message: str = "Please fix the form errors"):
        super().__init__(message)
        self.errors = errors


class ConflictError(VRPAError):
    """Requested transition is not allowed in the device's current state"""

    status_code = 409


class Unauthorized(VRPAError):
    """Missing, invalid or expired session token, or bad credentials"""

    status_code = 401


class TransientProbeFailure(VRPAError):
    """A reachability probe errored or timed out.

    Never surfaced to callers: the monitor records it as an ``unknown`` ping.
    """

    def __init__(self, address: str, reason: Optional[str] = None):
        super().__init__(f"Probe of {address} failed: {reason or 'unknown error'}")
        self.address = address
        self.reason = reason
