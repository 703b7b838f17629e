import sys

from termline.cli import main

sys.exit(main())
