import sys

from context_demo.cli import main

if __name__ == "__main__":
    sys.exit(main())
