import sys

from easynews.main import main

sys.exit(main())
