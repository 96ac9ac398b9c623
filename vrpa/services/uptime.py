"""
Uptime aggregation over ping history
"""

from collections import OrderedDict
from datetime import timezone
from typing import Dict, Iterable, List, Sequence

from vrpa.schemas.device import DeviceStatus
from vrpa.schemas.ping import DeviceUptime, PingRecord

def _day_key(ping: PingRecord) -> str:
    return ping.timestamp.astimezone(timezone.utc).date().isoformat()

def group_by_day(pings: Iterable[PingRecord]) -> Dict[str, List[PingRecord]]:
    """Partition pings by the UTC calendar date of their timestamp.

    Pings keep their input order within each day.
    """
    grouped: Dict[str, List[PingRecord]] = OrderedDict()
    for ping in pings:
        grouped.setdefault(_day_key(ping), []).append(ping)
    return grouped

def _successful(pings: Sequence[PingRecord]) -> int:
    return sum(1 for ping in pings if ping.status == DeviceStatus.ONLINE)

def daily_uptime(day_pings: Sequence[PingRecord]) -> float:
    """Percentage of pings that were online; 0 for a day without pings.

    Offline and unknown both count against the day.
    """
    if not day_pings:
        return 0.0
    return _successful(day_pings) / len(day_pings) * 100

def uptime_history(pings: Iterable[PingRecord]) -> List[DeviceUptime]:
    """One DeviceUptime per day present in ``pings``, oldest day first"""
    history = []
    for date, day_pings in group_by_day(pings).items():
        history.append(DeviceUptime(
            device_id=day_pings[0].device_id if day_pings else "",
            date=date,
            uptime_percentage=daily_uptime(day_pings),
            total_pings=len(day_pings),
            successful_pings=_successful(day_pings)
        ))
    return sorted(history, key=lambda entry: entry.date)

def overall_uptime(history: Sequence[DeviceUptime]) -> float:
    """Unweighted mean of the daily percentages.

    A day with two pings weighs as much as a day with two thousand.
    """
    if not history:
        return 0.0
    return sum(entry.uptime_percentage for entry in history) / len(history)

def format_uptime(percentage: float) -> str:
    return f"{percentage:.1f}%"
