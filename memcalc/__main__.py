import sys

from memcalc.repl import main

sys.exit(main())
