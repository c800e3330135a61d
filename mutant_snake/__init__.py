"""
Mutant Snake
============

Deterministic engine for a grid snake that grows by eating mutation-bearing
items: fixed-tick simulation, collisions, timed power-ups, scoring with
evolution tiers, and a persisted high-score leaderboard.

The locked tuning lives in game_config.yaml. Rendering, input devices and
reward payouts are external collaborators that talk to the engine through
snapshots, commands and notifier hooks.
"""
