import sys

from app.delivery_pricing.cli import main

sys.exit(main())
