"""Local Links Manager: reachability tracking for local authority service pages."""

__version__ = "0.1.0"
