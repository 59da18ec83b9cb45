"""Records passed between the loader, reconciler and applicator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

LOG_TABLE = "schema_updates"

CREATE_LOG_TABLE = f"""
CREATE TABLE IF NOT EXISTS {LOG_TABLE} (
    filename text,
    sequence integer,
    checksum text,
    timestamp text,
    contents text
)
"""

INSERT_LOG_ENTRY = f"""
INSERT INTO {LOG_TABLE} (filename, sequence, checksum, timestamp, contents)
VALUES (:filename, :sequence, :checksum, :timestamp, :contents)
"""

SELECT_LOG_ENTRIES = f"""
SELECT filename, sequence, checksum, timestamp, contents
FROM {LOG_TABLE}
ORDER BY sequence ASC
"""


@dataclass(frozen=True)
class Update:
    """One schema-change unit loaded from an update source."""

    filename: str
    sequence: int
    checksum: str
    contents: str = field(repr=False)


@dataclass(frozen=True)
class AppliedLogEntry:
    """One row of the ``schema_updates`` table."""

    filename: str
    sequence: int
    checksum: str
    timestamp: str | None
    contents: str | None = field(default=None, repr=False)

    @classmethod
    def from_row(cls, row: tuple) -> AppliedLogEntry:
        filename, sequence, checksum, timestamp, contents = row
        return cls(
            filename=filename,
            sequence=int(sequence),
            checksum=checksum,
            timestamp=None if timestamp is None else str(timestamp),
            contents=contents,
        )


@dataclass
class MigrationResult:
    """Result of a migration run."""

    applied: list[Update] = field(default_factory=list)
    skipped: list[Update] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return len(self.applied)

    def to_dict(self) -> dict[str, Any]:
        return {
            "applied": [u.filename for u in self.applied],
            "skipped": [u.filename for u in self.skipped],
            "applied_count": self.applied_count,
        }


@dataclass
class MigrationStatus:
    """Read-only view of what has been applied and what is pending."""

    applied: list[AppliedLogEntry] = field(default_factory=list)
    pending: list[Update] = field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        return not self.pending

    def to_dict(self) -> dict[str, Any]:
        return {
            "applied": [
                {
                    "sequence": e.sequence,
                    "filename": e.filename,
                    "checksum": e.checksum,
                    "timestamp": e.timestamp,
                }
                for e in self.applied
            ],
            "pending": [u.filename for u in self.pending],
            "up_to_date": self.up_to_date,
        }
