import sys

from lwserver.app import main

sys.exit(main())
