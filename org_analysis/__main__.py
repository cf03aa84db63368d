import sys

from org_analysis.cli import main

sys.exit(main())
