"""Allow running hline with ``python -m Hline``."""
from Hline.cli import main

if __name__ == "__main__":
    main()
