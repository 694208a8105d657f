"""Leaderboard domain services: windowing and ranking.

Ranking is a read-time aggregation over score events. ``ranking`` holds the
pure ordering rules; ``aggregator`` feeds it from the store.
"""
