"""
Runtime configuration, read from the environment at import time.
"""

import os

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Defaults for the calculation cache of the shared processor
CACHE_TTL_SECONDS = float(os.environ.get("QUOTE_CACHE_TTL_SECONDS", "5"))
CACHE_MAX_ENTRIES = int(os.environ.get("QUOTE_CACHE_MAX_ENTRIES", "100"))
