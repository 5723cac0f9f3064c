import sys

from tabtrail.cli import main

sys.exit(main())
