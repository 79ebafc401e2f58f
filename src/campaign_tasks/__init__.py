"""
Named fire-and-forget background tasks for campaign processing.
"""

__version__ = "0.1.0"
