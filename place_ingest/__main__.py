import sys

from place_ingest.cli import main

sys.exit(main())
