"""Command line demo client for the Context API"""

__version__ = "0.1.0"
