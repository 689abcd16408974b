#!/usr/bin/env python3
"""
Wrapper to run Virtual Eye from a source checkout.

Sets the spawn start method before torch is imported anywhere, then hands
over to virtual_eye.main.
"""
import multiprocessing as mp
import os
import sys

# Add src to path FIRST
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

if __name__ == "__main__":
    mp.set_start_method('spawn', force=True)

    from virtual_eye.main import main

    sys.exit(main(sys.argv[1:]))
