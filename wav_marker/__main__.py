"""Package entry point for ``python -m wav_marker``.

HOW: Delegates to the CLI's main() and exits with its status.
"""

import sys

from wav_marker.cli import main

if __name__ == "__main__":
    sys.exit(main())
