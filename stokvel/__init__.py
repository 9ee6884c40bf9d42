"""Stokvel dashboard client

Session handling, REST client and data synchronization for the
Powerhouse Stokvel Club member dashboard.
"""

__version__ = "0.1.0"
