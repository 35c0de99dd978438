import sys

from smartzprod.cli import main

sys.exit(main())
