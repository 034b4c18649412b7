import sys

from quatlib.cli import main

sys.exit(main())
