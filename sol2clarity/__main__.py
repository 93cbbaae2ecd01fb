import sys

from .sol2clar import main

sys.exit(main())
