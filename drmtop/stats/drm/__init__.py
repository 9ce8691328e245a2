# SPDX-License-Identifier: GPL-3.0-or-later
# DRM usage statistics facade

"""Per-process GPU engine utilization from DRM fdinfo accounting.

The kernel exposes cumulative busy times per DRM client in
/proc/<pid>/fdinfo. Each call to :meth:`DRMStats.sample` reads them once for
every process and turns the growth since the previous call into rates.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from ..proc import get_host_proc_path, list_fdinfo_paths, list_pids, read_process_name
from .base import CumulativeSnapshot, UsageRow
from .engines import MEMORY_UNITS
from .table import ProcessTable
from .usage import collect_device_snapshots

if TYPE_CHECKING:
    from ...settings import Settings

__all__ = ['DRMStats']


class DRMStats:
    """Samples DRM fdinfo usage for all processes.

    File reads may run on a thread pool; the process table is only touched
    from the thread calling :meth:`sample`.
    """

    def __init__(self, proc_path: Optional[Union[str, Path]] = None,
                 rate_formula: Optional[str] = None, memory_units: str = 'kib',
                 max_workers: int = 4,
                 table: Optional[ProcessTable] = None) -> None:
        if memory_units not in MEMORY_UNITS:
            raise ValueError(
                f"Unknown memory units {memory_units!r}, expected one of {', '.join(MEMORY_UNITS)}"
            )
        self.proc_path = Path(proc_path) if proc_path else get_host_proc_path()
        if table is not None and rate_formula is not None:
            raise ValueError("Pass either a rate formula or a table, not both")
        if table is None:
            table = ProcessTable(rate_formula if rate_formula is not None else 'divide')
        self.table = table
        self.legacy_memory = memory_units == 'legacy'
        self.max_workers = max(1, int(max_workers))

    @classmethod
    def from_settings(cls, settings: Settings,
                      rate_formula: Optional[str] = None) -> DRMStats:
        """Build a sampler configured from application settings.

        Args:
            settings: Application settings.
            rate_formula: Overrides the ``rate_formula`` setting when given.
        """
        return cls(
            proc_path=settings.get('proc_path') or None,
            rate_formula=rate_formula or settings.get('rate_formula'),
            memory_units=settings.get('memory_units'),
            max_workers=settings.get('max_workers'),
        )

    def _read_process(self, pid: int) -> Dict[str, CumulativeSnapshot]:
        paths = list_fdinfo_paths(self.proc_path, pid)
        if not paths:
            return {}
        return collect_device_snapshots(paths, legacy_memory=self.legacy_memory)

    def _read_all(self, pids: List[int]) -> Dict[int, Dict[str, CumulativeSnapshot]]:
        if self.max_workers == 1 or len(pids) < 2:
            return {pid: self._read_process(pid) for pid in pids}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return dict(zip(pids, executor.map(self._read_process, pids)))

    def sample(self, now: Optional[float] = None) -> List[UsageRow]:
        """Run one sampling tick.

        Args:
            now: Monotonic timestamp of the tick; defaults to ``time.monotonic()``.

        Returns:
            Usage rows of every process with at least one open device.
        """
        pids = list_pids(self.proc_path)
        readings = self._read_all(pids)
        if now is None:
            now = time.monotonic()

        for pid in pids:
            snapshots = readings.get(pid, {})
            name = ''
            if pid not in self.table and snapshots:
                name = read_process_name(self.proc_path, pid)
            self.table.reconcile(pid, name, snapshots, now)

        self.table.evict_exited(pids)
        return self.table.rows()
