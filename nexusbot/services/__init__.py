"""
Default startup collaborators: update check, config validation, dashboard
"""
