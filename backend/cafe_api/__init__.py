"""Cafe console API: admin sessions, presence and role-based access"""

__version__ = "0.1.0"
