"""nodetree: hierarchical node catalog with numeric properties."""

__version__ = "0.1.0"
