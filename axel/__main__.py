# =============================================================================
# axel/__main__.py - `python -m axel`
# =============================================================================

from axel.server import main

main()
