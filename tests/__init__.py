# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the AXEL server:
# - test_app.py: App factory wiring and listener bootstrap
# - test_config.py: Settings loading, parsing and immutability
# - test_health.py: GET /health contract
# - test_not_found.py: 404 fallback contract
# - test_errors.py: Generic 500 handling
# - test_cors.py: CORS allow-list behaviour
# - test_security_headers.py: Security headers on every response
# - test_body_parsing.py: JSON / URL-encoded parsing and size limits
#
# Run tests with: pytest
# =============================================================================
