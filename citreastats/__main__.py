"""Allow running as ``python -m citreastats``."""

from . import main

main()
