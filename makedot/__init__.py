"""Read a GNU make database and draw its target and variable graphs as Graphviz dot."""

__version__ = "0.1.0"
__all__ = ["__version__"]