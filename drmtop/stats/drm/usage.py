# SPDX-License-Identifier: GPL-3.0-or-later
# Device reduction and usage rates

"""Per-device reduction of fdinfo snapshots and utilization rates."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

from .base import ENGINES, NS_PER_SEC, CumulativeSnapshot, UsageRate
from .engines import normalize_record
from .fdinfo import collect_clients

RATE_FORMULAS = ('divide', 'multiply')


def reduce_by_device(
    snapshots: Iterable[Tuple[str, CumulativeSnapshot]],
) -> Dict[str, CumulativeSnapshot]:
    """Sum snapshots that belong to the same physical device.

    A process can hold several client contexts on one GPU. An empty device
    key groups like any other key.
    """
    reduced: Dict[str, CumulativeSnapshot] = {}
    for device, snapshot in snapshots:
        if device not in reduced:
            reduced[device] = CumulativeSnapshot()
        reduced[device].add(snapshot)
    return reduced


def collect_device_snapshots(
    paths: Iterable[Union[str, Path]],
    legacy_memory: bool = False,
) -> Dict[str, CumulativeSnapshot]:
    """Read a process's fdinfo files and return one snapshot per device."""
    clients = collect_clients(paths)
    return reduce_by_device(
        normalize_record(record, legacy_memory=legacy_memory)
        for record in clients.values()
    )


def check_formula(formula: str) -> str:
    if formula not in RATE_FORMULAS:
        raise ValueError(
            f"Unknown rate formula {formula!r}, expected one of {', '.join(RATE_FORMULAS)}"
        )
    return formula


def compute_usage_rate(
    previous: CumulativeSnapshot,
    previous_time: float,
    current: CumulativeSnapshot,
    current_time: float,
    formula: str = 'divide',
) -> UsageRate:
    """Derive per-engine utilization from two cumulative snapshots.

    ``divide`` gives busy seconds per wall-clock second. ``multiply`` is the
    legacy formula, busy seconds times elapsed seconds.
    A counter that went backwards contributes 0 for the interval.

    Args:
        previous: Snapshot taken at ``previous_time``.
        previous_time: Monotonic timestamp in seconds.
        current: Snapshot taken at ``current_time``.
        current_time: Monotonic timestamp in seconds.
        formula: ``'divide'`` or ``'multiply'``.

    Returns:
        UsageRate with one value per engine.
    """
    check_formula(formula)
    elapsed = current_time - previous_time
    if elapsed <= 0:
        return UsageRate()

    rates: Dict[str, float] = {}
    for engine in ENGINES:
        delta = max(0, getattr(current, engine) - getattr(previous, engine))
        busy = delta / NS_PER_SEC
        if formula == 'divide':
            rates[engine] = busy / elapsed
        else:
            rates[engine] = busy * elapsed
    return UsageRate(**rates)


class UsageState:
    """Running state of one (process, device) pair."""

    __slots__ = ('snapshot', 'timestamp', 'rate', 'samples')

    def __init__(self, snapshot: CumulativeSnapshot, timestamp: float,
                 rate: Optional[UsageRate] = None) -> None:
        self.snapshot = snapshot
        self.timestamp = timestamp
        self.rate = rate if rate is not None else UsageRate()
        self.samples = 1

    @classmethod
    def first(cls, snapshot: CumulativeSnapshot, timestamp: float) -> UsageState:
        """State for a device seen for the first time.

        The rate stays at zero until a second sample exists; the lifetime
        counter divided by a near-zero interval would only produce a spike.
        """
        return cls(snapshot, timestamp)

    def update(self, snapshot: CumulativeSnapshot, timestamp: float,
               formula: str = 'divide') -> UsageRate:
        """Compute the rate against the stored snapshot and replace it."""
        self.rate = compute_usage_rate(
            self.snapshot, self.timestamp, snapshot, timestamp, formula
        )
        self.snapshot = snapshot
        self.timestamp = timestamp
        self.samples += 1
        return self.rate
