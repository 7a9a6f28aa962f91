# relaypanel/__init__.py

"""
Relay access panel.

Manages proxy-access credentials and keeps an external relay process
configured with the current set of non-expired secrets.
"""

__version__ = "1.0.0"
