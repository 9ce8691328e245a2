# SPDX-License-Identifier: GPL-3.0-or-later
# DRM fdinfo record parsing

"""Parse the DRM usage keys out of /proc/<pid>/fdinfo/<fd> files.

Each open DRM file descriptor exposes ``drm-*`` key/value lines describing
the client context behind it. Files that are not DRM descriptors simply
contain no such lines.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Union

DRM_PREFIX = 'drm'
DRM_CLIENT_ID = 'drm-client-id'
DRM_PDEV = 'drm-pdev'

RawRecord = Dict[str, str]


def parse_fdinfo(text: str) -> RawRecord:
    """Extract ``drm*`` keys from the text of one fdinfo file.

    Args:
        text: Full file contents.

    Returns:
        Mapping of key to value, value stripped of leading whitespace.
    """
    record: RawRecord = {}
    for line in text.splitlines():
        if not line.startswith(DRM_PREFIX):
            continue
        key, sep, value = line.partition(':')
        if not sep:
            continue
        record[key] = value.lstrip()
    return record


def read_fdinfo(path: Union[str, Path]) -> RawRecord:
    """Read and parse one fdinfo file. Unreadable files give an empty record."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return parse_fdinfo(f.read())
    except (OSError, UnicodeDecodeError):
        return {}


def client_id(record: RawRecord) -> int:
    """Integer client id of a record, 0 when it does not parse."""
    try:
        return int(record[DRM_CLIENT_ID])
    except (KeyError, ValueError):
        return 0


def collect_clients(paths: Iterable[Union[str, Path]]) -> Dict[int, RawRecord]:
    """Parse fdinfo files and deduplicate them by DRM client id.

    Several descriptors (dup'd or passed between processes) may refer to the
    same client; they collapse into one record. Records without a client id
    are not DRM clients and are dropped.
    """
    clients: Dict[int, RawRecord] = {}
    for path in paths:
        record = read_fdinfo(path)
        if DRM_CLIENT_ID not in record:
            continue
        clients[client_id(record)] = record
    return clients
