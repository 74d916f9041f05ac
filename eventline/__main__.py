import sys

from eventline.cli import main

sys.exit(main())
