"""
scrobble-cli: submit album listening sessions to Last.fm as scrobbles.
"""

__version__ = "0.1.0"
