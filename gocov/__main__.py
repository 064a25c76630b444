# Copyright 2025 Irreducible Inc.
import sys

from gocov.cli import main

sys.exit(main())
