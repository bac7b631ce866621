#!/usr/bin/env python3
"""
Development runner - same as `python -m wa_relay`, usable from a checkout without installing
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from wa_relay.__main__ import main

if __name__ == '__main__':
    os.environ.setdefault('PYTHONUNBUFFERED', '1')
    sys.exit(main())
