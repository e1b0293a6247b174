import sys

from src.seed_engine.cli import main

if __name__ == "__main__":
    sys.exit(main())
