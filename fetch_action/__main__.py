import sys

from fetch_action.main import main

sys.exit(main())
