import sys

from lotmap_cli.cli import main

sys.exit(main())
