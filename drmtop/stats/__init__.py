# SPDX-License-Identifier: GPL-3.0-or-later
# Stats package for drmtop

"""Process and GPU statistics sampling modules."""

from .drm import DRMStats

__all__ = [
    'DRMStats',
]
