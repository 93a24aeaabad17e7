#!/usr/bin/env python3
"""
RISING LION Launcher
=====================
Run this script to start the game.
"""

from rising_lion.main import main

if __name__ == "__main__":
    main()
