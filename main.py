import sys

from mandelgray.cli import main

if __name__ == "__main__":
    sys.exit(main())
