# SPDX-License-Identifier: GPL-3.0-or-later
# Process/device usage table

"""Per-process table of device usage states.

The table is owned by the sampling loop; each tick reconciles the devices a
process reports with the states kept from earlier ticks.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from .base import CumulativeSnapshot, UsageRow
from .usage import UsageState, check_formula


class ProcessEntry:
    """A process and the usage state of every device it has open."""

    __slots__ = ('pid', 'name', 'devices')

    def __init__(self, pid: int, name: str) -> None:
        self.pid = pid
        self.name = name
        self.devices: Dict[str, UsageState] = {}

    def __repr__(self) -> str:
        return f'ProcessEntry(pid={self.pid}, name={self.name!r}, devices={sorted(self.devices)})'


class ProcessTable:
    """Mapping of PID to ProcessEntry, reconciled once per tick."""

    def __init__(self, rate_formula: str = 'divide') -> None:
        self.rate_formula = check_formula(rate_formula)
        self._processes: Dict[int, ProcessEntry] = {}

    def __contains__(self, pid: object) -> bool:
        return pid in self._processes

    def reconcile(self, pid: int, name: str,
                  snapshots: Mapping[str, CumulativeSnapshot],
                  now: float) -> Optional[ProcessEntry]:
        """Apply one tick's per-device snapshots to a process.

        New devices get a fresh state, known devices are updated and devices
        that did not report this tick are removed.

        Args:
            pid: Process ID.
            name: Process name, used when the process enters the table.
            snapshots: Reduced snapshots keyed by device.
            now: Monotonic timestamp of the tick.

        Returns:
            The process entry, or None if the process is not tracked.
        """
        entry = self._processes.get(pid)
        if entry is None:
            if not snapshots:
                return None
            entry = ProcessEntry(pid, name)
            self._processes[pid] = entry

        stale = set(entry.devices)
        for device, snapshot in snapshots.items():
            stale.discard(device)
            state = entry.devices.get(device)
            if state is None:
                entry.devices[device] = UsageState.first(snapshot, now)
            else:
                state.update(snapshot, now, self.rate_formula)

        for device in stale:
            del entry.devices[device]

        return entry

    def evict_exited(self, live_pids: Iterable[int]) -> List[int]:
        """Drop processes that no longer exist. Returns the removed PIDs."""
        live = set(live_pids)
        exited = [pid for pid in self._processes if pid not in live]
        for pid in exited:
            del self._processes[pid]
        return exited

    def rows(self) -> List[UsageRow]:
        """One row per (process, device), ordered by PID then device."""
        rows: List[UsageRow] = []
        for pid in sorted(self._processes):
            entry = self._processes[pid]
            for device in sorted(entry.devices):
                state = entry.devices[device]
                rows.append(UsageRow(pid, entry.name, device, state.rate, state.snapshot))
        return rows
