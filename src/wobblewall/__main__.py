"""
Run with: python -m wobblewall
"""
import sys

from wobblewall.app.main import main

if __name__ == "__main__":
    sys.exit(main())
