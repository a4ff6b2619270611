import sys

from airouter.server import main

sys.exit(main())
