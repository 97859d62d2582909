"""Scoreboard domain services: score state, day scheduling, storage and timers.

This package contains the plain-Python core that HTTP routes and socket
handlers call into, keeping transport concerns separated from the score
rules and the midnight rollover.
"""
