import sys

from tinypath.cli import main

sys.exit(main())
