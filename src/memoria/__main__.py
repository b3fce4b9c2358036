import sys

from memoria.cli import main

sys.exit(main())
