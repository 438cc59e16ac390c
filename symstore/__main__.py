import sys

from symstore.cli import main

sys.exit(main())
