"""
NexusBot - a discord.py bot with a resilient startup sequence
"""

__version__ = "1.0.0"
