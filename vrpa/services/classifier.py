"""
Ping result classification

Maps the raw outcome of a reachability probe onto a device status. A probe
that could not complete is never reported as ``offline``; ``offline`` needs a
probe that finished and saw the address refuse or drop the connection.
"""

from enum import Enum

from vrpa.schemas.device import DeviceStatus

class ProbeOutcome(str, Enum):
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    ERROR = "error"

_STATUS_BY_OUTCOME = {
    ProbeOutcome.REACHABLE: DeviceStatus.ONLINE,
    ProbeOutcome.UNREACHABLE: DeviceStatus.OFFLINE,
    ProbeOutcome.TIMEOUT: DeviceStatus.UNKNOWN,
    ProbeOutcome.ERROR: DeviceStatus.UNKNOWN,
}

def classify(outcome) -> DeviceStatus:
    """Return the device status for a probe outcome.

    Anything that is not a recognised outcome counts as a failed probe.
    """
    try:
        return _STATUS_BY_OUTCOME[ProbeOutcome(outcome)]
    except ValueError:
        return DeviceStatus.UNKNOWN
