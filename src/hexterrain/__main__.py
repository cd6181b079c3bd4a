"""Allow ``python -m hexterrain``."""

from .cli import main

main()
