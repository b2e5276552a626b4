"""
track-vault: an upload store and export tool for audio tracks.
"""

__version__ = "1.0.0"
