# SPDX-License-Identifier: GPL-3.0-or-later
# Utility functions

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Union

from .stats.drm.base import ENGINES, MEMORY_REGIONS, UsageRow

ENGINE_HEADERS = {
    'render': 'REND',
    'compute': 'COMP',
    'copy': 'COPY',
    'encode': 'ENC',
    'decode': 'DEC',
    'video_enhance': 'VENH',
}


def format_kib(kib: Union[int, float]) -> str:
    """
    Format a size given in KiB to human-readable string (e.g., '1.5 GiB').

    Args:
        kib: Size in KiB.

    Returns:
        Formatted string with appropriate unit.
    """
    if kib >= 1024 * 1024:
        return f"{kib / (1024 * 1024):.1f} GiB"
    elif kib >= 1024:
        return f"{kib / 1024:.1f} MiB"
    return f"{int(kib)} KiB"


def format_percent(rate: float) -> str:
    """Format a utilization fraction as a percentage ('12.5%')."""
    return f"{rate * 100:.1f}%"


def is_idle(row: UsageRow) -> bool:
    return not any(getattr(row.rate, engine) for engine in ENGINES)


def format_rows(rows: Iterable[UsageRow],
                vendor: Optional[Callable[[str], str]] = None,
                show_idle: bool = True) -> List[str]:
    """
    Render usage rows as aligned console lines, header first.

    Args:
        rows: Rows of one sampling tick.
        vendor: Optional lookup from device key to vendor name.
        show_idle: Include devices with every engine at zero.

    Returns:
        Lines without trailing newlines.
    """
    header = f"{'PID':>7} {'NAME':<16} {'DEVICE':<14} {'VENDOR':<7}"
    header += ''.join(f" {ENGINE_HEADERS[engine]:>6}" for engine in ENGINES)
    header += f" {'VRAM':>10} {'GTT':>10} {'CPU':>10}"
    lines = [header]

    for row in rows:
        if not show_idle and is_idle(row):
            continue
        device = row.device or '-'
        vendor_name = (vendor(row.device) if vendor else '') or '-'
        line = f"{row.pid:>7} {row.name[:16]:<16} {device:<14} {vendor_name:<7}"
        line += ''.join(f" {format_percent(getattr(row.rate, engine)):>6}" for engine in ENGINES)
        line += ''.join(f" {format_kib(row.memory[region]):>10}" for region in MEMORY_REGIONS)
        lines.append(line)

    return lines
