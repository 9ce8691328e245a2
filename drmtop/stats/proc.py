# SPDX-License-Identifier: GPL-3.0-or-later
# /proc access

"""Utilities for enumerating processes and their fdinfo files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Union


def get_host_proc_path() -> Path:
    """Get the path to host /proc.

    Returns:
        Path to /proc (or /run/host/proc in Flatpak).
    """
    if os.path.exists('/run/host/proc') and os.path.isdir('/run/host/proc'):
        return Path('/run/host/proc')
    return Path('/proc')


def list_pids(proc_path: Union[str, Path]) -> List[int]:
    """List the process IDs present under a proc mount.

    Returns:
        PIDs in ascending order, or an empty list if the directory cannot be read.
    """
    try:
        names = os.listdir(proc_path)
    except OSError:
        return []
    return sorted(int(name) for name in names if name.isdigit())


def read_process_name(proc_path: Union[str, Path], pid: int) -> str:
    """Read a process name from ``comm``. Returns '' if unavailable."""
    try:
        with open(Path(proc_path) / str(pid) / 'comm', 'r', encoding='utf-8',
                  errors='replace') as f:
            name = f.read()
    except OSError:
        return ''
    if name.endswith('\n'):
        name = name[:-1]
    return name


def list_fdinfo_paths(proc_path: Union[str, Path], pid: int) -> List[Path]:
    """List the fdinfo files of a process.

    Processes of other users are usually unreadable; that gives an empty list.
    """
    fdinfo_dir = Path(proc_path) / str(pid) / 'fdinfo'
    try:
        entries = os.listdir(fdinfo_dir)
    except OSError:
        return []
    return [fdinfo_dir / entry for entry in entries]
