import sys

from pydfa.cli import main

sys.exit(main())
