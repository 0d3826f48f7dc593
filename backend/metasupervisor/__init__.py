"""meta-supervisor: semantic indexing and supervision of source code."""

__version__ = "0.1.0"
