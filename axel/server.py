# =============================================================================
# axel/server.py - Listener Bootstrap
# =============================================================================
# Starts uvicorn on the configured host and port.
#
# Usage:
#   axel
#   python -m axel
#   PORT=8080 ALLOWED_ORIGINS=https://example.com axel
# =============================================================================

import uvicorn

from axel.config import get_settings
from axel.logging_config import configure_logging
from axel.main import create_app


def main() -> None:
    """Read settings once, build the app and serve it until interrupted."""
    settings = get_settings()
    configure_logging(settings)

    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.DEBUG else "info",
        # Do not advertise the server stack
        server_header=False,
    )


if __name__ == "__main__":
    main()
