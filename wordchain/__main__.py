#!/usr/bin/env python3
"""Allow running as `python -m wordchain`."""

import sys

from wordchain.cli import main

sys.exit(main())
