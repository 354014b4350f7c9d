"""
suiup, the installer and version manager for the Sui tool family.
"""

__version__ = "0.1.0"
