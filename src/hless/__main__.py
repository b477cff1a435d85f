import sys

from hless.cli import main

sys.exit(main())
