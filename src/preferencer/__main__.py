import sys

from preferencer.cli import main

sys.exit(main())
