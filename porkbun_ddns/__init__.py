"""Dynamic DNS updater for Porkbun"""

__version__ = "0.1.0"
