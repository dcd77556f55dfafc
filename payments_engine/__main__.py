"""Allows `python -m payments_engine <input_csv_file>`"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
