import sys

from lambdacalc.main import main

sys.exit(main())
