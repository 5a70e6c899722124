"""
Outcome values for board operations.

Board operations never raise across the synchronizer boundary; they return a
SyncResult tagged with one of the statuses below and let the caller decide
whether to retry, surface or ignore.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SyncStatus(Enum):
    OK = "ok"
    SKIPPED = "skipped"                  # validation skip, nothing written
    NOT_FOUND = "not_found"              # referenced entity missing, nothing written
    REMOTE_FAILURE = "remote_failure"    # remote write failed, store untouched
    PARTIAL_FAILURE = "partial_failure"  # multi-record write, some records failed
    INCONSISTENT = "inconsistent"        # multi-step write left remote state half-applied


@dataclass
class SyncResult:
    status: SyncStatus
    value: Any = None
    reason: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is SyncStatus.OK

    @classmethod
    def success(cls, value: Any = None) -> "SyncResult":
        return cls(SyncStatus.OK, value=value)

    @classmethod
    def skipped(cls, reason: str) -> "SyncResult":
        return cls(SyncStatus.SKIPPED, reason=reason)

    @classmethod
    def not_found(cls, reason: str) -> "SyncResult":
        return cls(SyncStatus.NOT_FOUND, reason=reason)

    @classmethod
    def remote_failure(cls, error: BaseException, reason: Optional[str] = None) -> "SyncResult":
        return cls(SyncStatus.REMOTE_FAILURE, reason=reason or str(error), error=error)
