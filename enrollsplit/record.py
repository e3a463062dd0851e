"""
Enrollment record model.

An EnrollmentRecord is one row of the master enrollment file. Equality and
ordering are tailored to the splitter: equality ignores the name, ordering
ignores the user id. Review both before reusing the class elsewhere.
"""

import re
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from .errors import MalformedRecordError

USER_ID_COLUMN = "user_id"
NAME_COLUMN = "name"
VERSION_COLUMN = "version"
INSURANCE_COLUMN = "insurance_company"

# Output column order; the input may list them in any order.
COLUMNS = (USER_ID_COLUMN, NAME_COLUMN, VERSION_COLUMN, INSURANCE_COLUMN)

_VERSION_RE = re.compile(r"[0-9]+")


def split_full_name(full_name: str) -> Tuple[str, str]:
    """Split a full name at its last space into (first_name, last_name)."""
    trimmed = full_name.strip()
    idx = trimmed.rfind(" ")
    if idx <= 0:
        raise MalformedRecordError(
            f"name {full_name!r} has no space separating first and last name",
            field=NAME_COLUMN,
        )
    return trimmed[:idx].strip(), trimmed[idx + 1:]


@dataclass(frozen=True)
class EnrollmentRecord:
    """A single enrollee revision for one insurance company."""

    user_id: str
    version: int
    full_name: str = field(compare=False)
    insurance_company: str
    first_name: str = field(init=False, compare=False)
    last_name: str = field(init=False, compare=False)

    def __post_init__(self):
        first, last = split_full_name(self.full_name)
        object.__setattr__(self, "first_name", first)
        object.__setattr__(self, "last_name", last)

    def __lt__(self, other: "EnrollmentRecord") -> bool:
        if not isinstance(other, EnrollmentRecord):
            return NotImplemented
        return compare(self, other) < 0

    @property
    def identity(self) -> Tuple[str, str]:
        """Deduplication identity: (insurance_company, user_id)."""
        return (self.insurance_company, self.user_id)

    def as_row(self) -> List[str]:
        """Output line in COLUMNS order."""
        return [self.user_id, self.full_name, str(self.version), self.insurance_company]


def output_sort_key(record: EnrollmentRecord) -> Tuple[str, str, int]:
    """Final output order: last name, first name, then highest version first."""
    return (record.last_name, record.first_name, -record.version)


def latest_version_key(record: EnrollmentRecord) -> Tuple[str, str, int]:
    """
    Rank used to pick the winning revision of a user.

    Lowest key wins. Matches output_sort_key today, so the highest version only
    wins when every revision of a user carries the same name.
    """
    return (record.last_name, record.first_name, -record.version)


def compare(a: EnrollmentRecord, b: EnrollmentRecord) -> int:
    """Three-way comparison by output_sort_key: negative, zero or positive."""
    ka = output_sort_key(a)
    kb = output_sort_key(b)
    return (ka > kb) - (ka < kb)


def _parse_version(raw: str, line_number: Optional[int]) -> int:
    text = raw.strip()
    if not _VERSION_RE.fullmatch(text):
        raise MalformedRecordError(
            f"version {raw!r} is not a non-negative integer",
            line_number=line_number,
            field=VERSION_COLUMN,
        )
    return int(text)


def parse_record(row: Mapping[str, Optional[str]], line_number: Optional[int] = None) -> EnrollmentRecord:
    """
    Build an EnrollmentRecord from a row keyed by the fixed header names.

    Args:
        row: Mapping of column name to raw string value (e.g. a csv.DictReader row)
        line_number: Source line, used only in error messages

    Returns:
        Parsed EnrollmentRecord

    Raises:
        MalformedRecordError: Missing field, empty user id, bad version or unsplittable name
    """
    values = {}
    for column in COLUMNS:
        value = row.get(column)
        if value is None:
            raise MalformedRecordError(
                f"missing field '{column}'", line_number=line_number, field=column
            )
        values[column] = value

    if not values[USER_ID_COLUMN].strip():
        raise MalformedRecordError(
            "user_id is empty", line_number=line_number, field=USER_ID_COLUMN
        )

    version = _parse_version(values[VERSION_COLUMN], line_number)

    try:
        return EnrollmentRecord(
            user_id=values[USER_ID_COLUMN],
            version=version,
            full_name=values[NAME_COLUMN],
            insurance_company=values[INSURANCE_COLUMN],
        )
    except MalformedRecordError as e:
        raise MalformedRecordError(
            str(e), line_number=line_number, field=e.field
        ) from e
