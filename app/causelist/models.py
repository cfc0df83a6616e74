"""Data types shared across the sync pipeline."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class SyncRequest:
    user_id: str
    advocate_identifier: str
    court: str

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.user_id, self.advocate_identifier, self.court)


@dataclass
class RawRow:
    """Cell contents of one results-table row, before normalisation.

    Multi-line cells keep one entry per rendered line (``<br>`` boundaries),
    so the normaliser can decide how to join them.
    """

    serial_no: str = ""
    case_details_lines: List[str] = field(default_factory=list)
    case_anchor: Optional[str] = None
    party_lines: List[str] = field(default_factory=list)
    petitioner_advocate_lines: List[str] = field(default_factory=list)
    respondent_advocate_lines: List[str] = field(default_factory=list)
    district_lines: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CauselistRecord:
    serial_no: str
    case_number: str
    case_details: str
    case_details_raw: str
    party: str
    petitioner: str
    respondent: str
    petitioner_advocate: str
    respondent_advocate: str
    district: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CauselistRecord":
        values = {name: str(data.get(name) or "") for name in cls.__dataclass_fields__}
        return cls(**values)


class ResultsPresence(str, Enum):
    PRESENT = "present"
    EMPTY = "empty"


@dataclass
class SyncResult:
    user_id: str
    advocate_identifier: str
    court: str
    records: List[CauselistRecord]
    last_synced_at: str
    empty: bool = False
    skipped_steps: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)

    def to_document(self) -> Dict[str, Any]:
        """Return the persisted/API shape of this result."""

        return {
            "userId": self.user_id,
            "advocateIdentifier": self.advocate_identifier,
            "court": self.court,
            "lastSyncedAt": self.last_synced_at,
            "count": self.count,
            "data": [record.to_dict() for record in self.records],
        }


__all__ = [
    "UNKNOWN",
    "SyncRequest",
    "RawRow",
    "CauselistRecord",
    "ResultsPresence",
    "SyncResult",
]
