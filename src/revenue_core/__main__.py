import sys

from revenue_core.cli import main

sys.exit(main())
