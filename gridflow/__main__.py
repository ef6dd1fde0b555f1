"""Entry point for running GridFlow as a module: python -m gridflow"""

import sys
from .ui import main

if __name__ == "__main__":
    sys.exit(main())
