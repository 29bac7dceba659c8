#!/usr/bin/env python3
"""
Timeline Summary - print Raw/Net/Actual durations for a saved timeline

Usage:
    bin/timeline-summary.py production-timeline.txt --format text --unit hours
"""

import os
import sys

# Add src/python directory to Python path
script_dir = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(os.path.dirname(script_dir), 'src', 'python')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from summary_cli import main

if __name__ == '__main__':
    sys.exit(main())
