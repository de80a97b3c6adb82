import sys

from healthgate.cli import main

sys.exit(main())
