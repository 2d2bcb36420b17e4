"""Post, comment and like synchronization for a faith-community feed."""

__version__ = "0.1.0"
