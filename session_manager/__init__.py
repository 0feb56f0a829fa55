"""
Persistent session manager.

Stores per-user session documents in an Oracle NoSQL cloud table and
exposes them over HTTP.
"""

__version__ = "0.1.0"
