"""Filter expression builder compiling nested predicates to QueryKit filter strings."""

__version__ = "0.1.0"
