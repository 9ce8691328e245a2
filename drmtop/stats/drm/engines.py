# SPDX-License-Identifier: GPL-3.0-or-later
# Engine and memory key normalization

"""Map vendor specific DRM fdinfo keys onto engine and memory categories.

Drivers name their engines differently (i915 reports ``render`` and a
combined ``video`` engine, amdgpu reports ``gfx``, ``enc`` and ``dec``).
Adding support for a new key name is a single entry in the tables below;
keys that are not listed are ignored.
"""

from __future__ import annotations

import re
from typing import Dict, Tuple

from .base import CumulativeSnapshot
from .fdinfo import DRM_PDEV, RawRecord

# Key -> engine fields the busy time is added to
ENGINE_KEYS: Dict[str, Tuple[str, ...]] = {
    'drm-engine-render': ('render',),
    'drm-engine-gfx': ('render',),
    'drm-engine-compute': ('compute',),
    'drm-engine-copy': ('copy',),
    'drm-engine-enc': ('encode',),
    'drm-engine-enc_1': ('encode',),
    'drm-engine-dec': ('decode',),
    # i915 does not tell decode and encode apart
    'drm-engine-video': ('encode', 'decode'),
    'drm-engine-video-enhance': ('video_enhance',),
}

# Key -> memory region
MEMORY_KEYS: Dict[str, str] = {
    'drm-memory-vram': 'vram',
    'drm-memory-gtt': 'gtt',
    'drm-memory-cpu': 'cpuram',
    'drm-memory-system': 'cpuram',
}

# Duration unit -> nanoseconds
DURATION_UNITS: Dict[str, int] = {
    'ns': 1,
    'us': 1_000,
    'ms': 1_000_000,
}

MEMORY_UNITS = ('kib', 'legacy')

_AMOUNT_RE = re.compile(r'[0-9]+')


def _split_amount(value: str) -> Tuple[int, str]:
    """Split ``"<int> <unit>"`` on the first space.

    Raises ValueError unless the amount is made of ASCII digits only.
    """
    amount, _, unit = value.partition(' ')
    if not _AMOUNT_RE.fullmatch(amount):
        raise ValueError(f"malformed amount: {value!r}")
    return int(amount), unit


def parse_duration(value: str) -> int:
    """Parse a busy time such as ``"1234 ns"`` into nanoseconds.

    Unknown units and malformed numbers give 0.
    """
    try:
        amount, unit = _split_amount(value)
    except ValueError:
        return 0
    return amount * DURATION_UNITS.get(unit, 0)


def parse_memory(value: str, legacy: bool = False) -> int:
    """Parse a memory size such as ``"512 KiB"`` into KiB.

    The default convention treats ``MiB`` as 1024 KiB and a bare number (or
    any unit it does not know) as bytes.

    With ``legacy`` set the older conversion table is used as-is:
    units are matched case-sensitively, ``mib`` is divided by 1024, any other
    unit (including the kernel's ``KiB``) is multiplied by 1024 and a bare
    number reads as 0.
    """
    try:
        amount, unit = _split_amount(value)
    except ValueError:
        return 0

    if legacy:
        if unit == 'kib':
            return amount
        if unit == 'mib':
            return amount // 1024
        if not unit:
            return 0
        return amount * 1024

    unit = unit.lower()
    if unit == 'kib':
        return amount
    if unit == 'mib':
        return amount * 1024
    return amount // 1024


def normalize_record(record: RawRecord,
                     legacy_memory: bool = False) -> Tuple[str, CumulativeSnapshot]:
    """Turn one parsed fdinfo record into a device key and a snapshot."""
    snapshot = CumulativeSnapshot()

    for key, value in record.items():
        engines = ENGINE_KEYS.get(key)
        if engines:
            busy = parse_duration(value)
            for engine in engines:
                setattr(snapshot, engine, getattr(snapshot, engine) + busy)
            continue

        region = MEMORY_KEYS.get(key)
        if region:
            size = parse_memory(value, legacy=legacy_memory)
            setattr(snapshot, region, getattr(snapshot, region) + size)

    return record.get(DRM_PDEV, ''), snapshot
