import sys

from histlog.main import main

sys.exit(main())
