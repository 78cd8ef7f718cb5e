import sys

from dualmod.cli import main

sys.exit(main())
