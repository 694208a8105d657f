"""Game domain services: score recording.

This package contains the domain logic that HTTP routes call when a game
finishes, keeping transport concerns separated from score bookkeeping.
"""
