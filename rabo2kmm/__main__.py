import sys

from rabo2kmm.app import main

sys.exit(main())
