"""SSH Launch - interactive launcher for hosts in your SSH config."""

__version__ = "1.0.0"
