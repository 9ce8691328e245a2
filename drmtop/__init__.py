# SPDX-License-Identifier: GPL-3.0-or-later
# drmtop

"""drmtop - per-process GPU engine utilization for Linux.

This package samples the DRM fdinfo accounting the kernel exposes for every
open GPU client and reports per-process, per-device engine utilization and
memory residency.
"""

from .constants import APP_ID, APP_NAME, APP_VERSION

__all__ = ['APP_ID', 'APP_NAME', 'APP_VERSION']
__version__ = APP_VERSION
