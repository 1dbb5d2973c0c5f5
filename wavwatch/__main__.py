import sys

from wavwatch.cli import main

if __name__ == "__main__":
    sys.exit(main())
