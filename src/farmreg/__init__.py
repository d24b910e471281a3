"""Farmer registration over USSD."""

__version__ = "0.1.0"
