# SPDX-License-Identifier: GPL-3.0-or-later
# GPU vendor detection

"""Vendor identification for DRM devices reported by fdinfo."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Union

PCI_DEVICES_PATH = Path('/sys/bus/pci/devices')

# PCI vendor ID -> vendor name
VENDOR_IDS: Dict[str, str] = {
    '0x8086': 'intel',
    '0x1002': 'amd',
    '0x1022': 'amd',
    '0x10de': 'nvidia',
}


def device_vendor(pdev: str, sys_path: Union[str, Path] = PCI_DEVICES_PATH) -> str:
    """Get the vendor of a device from its PCI bus address.

    Args:
        pdev: Device key as reported by ``drm-pdev`` (e.g. ``0000:00:02.0``).
        sys_path: Directory holding one entry per PCI device.

    Returns:
        Vendor name ('intel', 'amd', 'nvidia'), the raw vendor ID for other
        vendors, or an empty string if it cannot be read.
    """
    if not pdev or '/' in pdev:
        return ''

    vendor_path = Path(sys_path) / pdev / 'vendor'
    try:
        with open(vendor_path, 'r') as f:
            vendor_id = f.read().strip().lower()
    except (OSError, IOError):
        return ''

    return VENDOR_IDS.get(vendor_id, vendor_id)


class VendorCache:
    """Remembers vendor lookups; device keys are stable for a device's lifetime."""

    def __init__(self, sys_path: Union[str, Path] = PCI_DEVICES_PATH) -> None:
        self._sys_path = Path(sys_path)
        self._vendors: Dict[str, str] = {}

    def get(self, pdev: str) -> str:
        if pdev not in self._vendors:
            self._vendors[pdev] = device_vendor(pdev, self._sys_path)
        return self._vendors[pdev]
