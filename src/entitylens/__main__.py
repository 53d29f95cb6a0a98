"""Allow running EntityLens as ``python -m entitylens``."""

from entitylens.cli import main

if __name__ == "__main__":
    main()
