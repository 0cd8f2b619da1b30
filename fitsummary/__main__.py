import sys

from fitsummary.cli import main

sys.exit(main())
