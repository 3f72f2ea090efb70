"""Console d'administration des utilisateurs."""

__version__ = "0.1.0"
