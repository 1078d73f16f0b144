"""Domain services: replay verification, session tickets and the leaderboard.

Imported by HTTP routes, socket handlers and CLI commands, keeping transport
concerns separated from the game rules.
"""
