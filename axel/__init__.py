# =============================================================================
# axel/ - AXEL HTTP Server Package
# =============================================================================
# This package contains the whole HTTP request pipeline:
# - main.py: App factory, lifespan, route and exception handler wiring
# - config.py: Environment variable loading and settings
# - exceptions.py: Error types and the generic error responses
# - logging_config.py: Process-wide logging setup
# - middleware/: Ordered request stages (security headers, CORS, errors, body)
# - routers/: HTTP endpoints (health check)
# - server.py: Listener bootstrap (uvicorn)
# =============================================================================

__version__ = "1.0.0"
