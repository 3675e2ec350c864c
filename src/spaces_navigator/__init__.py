"""Interactive navigation of Upbound organizations, Spaces, groups and control planes."""

from spaces_navigator.__version__ import __version__

__all__ = ["__version__"]
