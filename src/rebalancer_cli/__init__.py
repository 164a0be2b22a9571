"""Command line front-end for the portfolio rebalancer."""

__version__ = "1.0.0"
