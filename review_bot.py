#!/usr/bin/env python3
"""
Translation Review Bot

Reviews translation changes in a GitHub pull request and reports the
findings as a check run. See ``translation_review.app`` for the flow.
"""

import sys

from translation_review.app import main


if __name__ == "__main__":
    sys.exit(main())
