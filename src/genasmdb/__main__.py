import sys

from genasmdb.db import main


if __name__ == "__main__":
    sys.exit(main())
