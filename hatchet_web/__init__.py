"""Charts and log tables for parsed MongoDB log datasets ("hatchets")."""

__version__ = "0.3.0"
