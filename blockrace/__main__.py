import sys

from blockrace.main import main

sys.exit(main())
