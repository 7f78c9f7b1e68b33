import sys

from pos_checkout.cli import main

sys.exit(main())
