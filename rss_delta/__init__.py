"""
RSS Delta - Detect new items in RSS feeds between runs.

Polls a list of RSS feeds, fingerprints every item and reconciles
the result against a persisted record so only unseen items are reported.
"""

__version__ = "1.0.0"
