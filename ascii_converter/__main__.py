import sys

from .cli.interactive import main

if __name__ == "__main__":
    sys.exit(main())
