"""
Grouping and winner selection.

Records are grouped by insurance company, then by user id. Each user keeps a
single winner slot that is replaced only when a strictly better-ranked record
arrives, so ties keep the first record seen.
"""

from typing import Dict, Iterable, List, Optional

from .logger import StructuredLogger
from .record import EnrollmentRecord, latest_version_key

WinnerMap = Dict[str, Dict[str, EnrollmentRecord]]


def _is_better(candidate: EnrollmentRecord, current: EnrollmentRecord) -> bool:
    return latest_version_key(candidate) < latest_version_key(current)


def group_winners(
    records: Iterable[EnrollmentRecord],
    logger: Optional[StructuredLogger] = None,
) -> WinnerMap:
    """
    Build company -> user id -> winning record.

    Args:
        records: Parsed enrollment records in any order
        logger: Optional logger for per-replacement debug output

    Returns:
        Nested mapping with exactly one record per (company, user id)
    """
    winners: WinnerMap = {}
    for record in records:
        users = winners.setdefault(record.insurance_company, {})
        current = users.get(record.user_id)
        if current is None:
            users[record.user_id] = record
        elif _is_better(record, current):
            users[record.user_id] = record
            if logger:
                logger.debug(
                    "Replaced winner",
                    company=record.insurance_company,
                    user_id=record.user_id,
                    old_version=current.version,
                    new_version=record.version,
                )
    return winners


def select_partitions(
    records: Iterable[EnrollmentRecord],
    logger: Optional[StructuredLogger] = None,
) -> Dict[str, List[EnrollmentRecord]]:
    """Return the unsorted winners of each insurance company."""
    winners = group_winners(records, logger=logger)
    return {company: list(users.values()) for company, users in winners.items()}
