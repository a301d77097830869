# pyright: standard

"""rsync-backup: rsync_backup/__main__.py.

Back up a set of directory trees with rsync, sending each directory that
can be copied in one piece as a single item.
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
