# SPDX-License-Identifier: GPL-3.0-or-later
# Application constants

"""Application-wide constants and configuration values."""

# Application identifier
APP_ID = "io.github.drmtop.DrmTop"

# Application metadata
APP_NAME = "drmtop"
APP_VERSION = "1.0.0"

# Default refresh interval in milliseconds
DEFAULT_REFRESH_INTERVAL = 1000

# Shortest refresh interval accepted from the command line or settings
MIN_REFRESH_INTERVAL = 50
