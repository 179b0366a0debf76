# =============================================================================
# axel/routers/ - HTTP Route Definitions
# =============================================================================
# - health.py: Health check endpoint
#
# Unmatched routes are answered by the 404 handler in main.py.
# =============================================================================

from . import health

__all__ = [
    "health",
]
