"""rcli: a small toolbox of data-transform and crypto commands."""

__version__ = "0.1.0"
