"""Filtering and timing threshold configuration values.

Both are read-only snapshots built from the application settings; the
delegator asks for a fresh snapshot on every event.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FilterConfig:
    """Per-operation dump flags plus the master filtering switch.

    Attributes:
        dump_select: Log ``select`` statements when filtering is on
        dump_insert: Log ``insert`` statements when filtering is on
        dump_update: Log ``update`` statements when filtering is on
        dump_delete: Log ``delete`` statements when filtering is on
        dump_create: Log ``create`` statements when filtering is on
        filtering_enabled: When False every statement is logged
    """

    dump_select: bool = True
    dump_insert: bool = True
    dump_update: bool = True
    dump_delete: bool = True
    dump_create: bool = True
    filtering_enabled: bool = False


@dataclass(frozen=True)
class ThresholdConfig:
    """SQL timing thresholds in milliseconds; None disables a threshold.

    The error threshold is expected to be >= the warn threshold, but this is
    not enforced.
    """

    warn_threshold_ms: int | None = None
    error_threshold_ms: int | None = None

    @property
    def warn_enabled(self) -> bool:
        return self.warn_threshold_ms is not None

    @property
    def error_enabled(self) -> bool:
        return self.error_threshold_ms is not None
