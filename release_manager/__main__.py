"""Run the release manager: python -m release_manager"""

import sys

from release_manager.cli import main

if __name__ == "__main__":
    sys.exit(main())
