import sys

from house_facing.cli import main

sys.exit(main())
