"""Automagic - dictionary coding for object graphs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("automagic")
except PackageNotFoundError:
    __version__ = "(local)"
