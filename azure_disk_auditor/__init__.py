"""Azure tenant-wide disk audit"""

__version__ = "1.0.0"
