"""Procedurally animated wobbling concentric curves, usable as a live wallpaper."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("wobblewall")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
