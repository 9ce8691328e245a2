# SPDX-License-Identifier: GPL-3.0-or-later
# DRM usage data types

"""Value types shared by the DRM fdinfo sampling pipeline."""

from __future__ import annotations

from typing import Dict, Tuple


# Engine categories, in display order
ENGINES: Tuple[str, ...] = (
    'render',
    'compute',
    'copy',
    'encode',
    'decode',
    'video_enhance',
)

# Memory regions, sizes in KiB
MEMORY_REGIONS: Tuple[str, ...] = ('vram', 'gtt', 'cpuram')

NS_PER_SEC = 1_000_000_000


class CumulativeSnapshot:
    """Cumulative engine busy time and memory residency of one device.

    Busy times are integer nanoseconds, memory sizes are integer KiB.
    """

    __slots__ = ENGINES + MEMORY_REGIONS

    def __init__(self, **values: int) -> None:
        for field in self.__slots__:
            setattr(self, field, int(values.pop(field, 0)))
        if values:
            raise TypeError(f"Unknown snapshot fields: {', '.join(sorted(values))}")

    def add(self, other: CumulativeSnapshot) -> None:
        """Add another snapshot to this one, field by field."""
        for field in self.__slots__:
            setattr(self, field, getattr(self, field) + getattr(other, field))

    def as_dict(self) -> Dict[str, int]:
        return {field: getattr(self, field) for field in self.__slots__}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CumulativeSnapshot):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        fields = ', '.join(f'{k}={v}' for k, v in self.as_dict().items() if v)
        return f'CumulativeSnapshot({fields})'


class UsageRate:
    """Per-engine utilization derived from two consecutive snapshots."""

    __slots__ = ENGINES

    def __init__(self, **values: float) -> None:
        for engine in ENGINES:
            setattr(self, engine, float(values.pop(engine, 0.0)))
        if values:
            raise TypeError(f"Unknown engines: {', '.join(sorted(values))}")

    def as_dict(self) -> Dict[str, float]:
        return {engine: getattr(self, engine) for engine in ENGINES}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UsageRate):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        rates = ', '.join(f'{k}={v:.4f}' for k, v in self.as_dict().items())
        return f'UsageRate({rates})'


class UsageRow:
    """One exported (process, device) line of a sampling tick."""

    __slots__ = ('pid', 'name', 'device', 'rate', 'memory')

    def __init__(self, pid: int, name: str, device: str,
                 rate: UsageRate, snapshot: CumulativeSnapshot) -> None:
        self.pid = pid
        self.name = name
        self.device = device
        self.rate = rate
        self.memory: Dict[str, int] = {
            region: getattr(snapshot, region) for region in MEMORY_REGIONS
        }

    def as_dict(self) -> Dict[str, object]:
        """Flatten the row for display or export."""
        row: Dict[str, object] = {
            'pid': self.pid,
            'name': self.name,
            'device': self.device,
        }
        row.update(self.rate.as_dict())
        row.update(self.memory)
        return row

    def __repr__(self) -> str:
        return f'UsageRow(pid={self.pid}, name={self.name!r}, device={self.device!r})'
