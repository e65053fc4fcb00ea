import sys

from skilookup.cli import main

sys.exit(main())
