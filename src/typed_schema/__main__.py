import sys

from typed_schema.cli import main

sys.exit(main())
