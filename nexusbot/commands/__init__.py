"""
Bundled command modules, loaded as discord.py extensions
"""
