"""
Development Runner
==================
Starts Wobble Wall straight from a source checkout, without installing it.

Why is this file needed?
------------------------
1. It sits outside the 'src' package and puts 'src' on 'sys.path', so
   'from wobblewall...' resolves without 'pip install -e .'.
2. On Windows it sets an explicit AppUserModelID so the tray icon and the
   taskbar entry are grouped under Wobble Wall rather than python.exe.

Usage:
    $ python run.py [--debug] [--log-file PATH] [--single]
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

appid = 'wobblewall.WobbleWall'
try:
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(appid)
except (AttributeError, ImportError):
    # Not on Windows
    pass

from wobblewall.app.main import main

if __name__ == "__main__":
    sys.exit(main())
