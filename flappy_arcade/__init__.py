"""
Flappy Arcade Package
=====================

This package contains the deterministic simulation core for a tap-to-flap
arcade game, plus the thin host layers that drive it:

- Bird integration and impulses
- Fixed-size pipe pool with in-place recycling
- Scoring and collision detection
- The session state machine (running -> game over -> reset)

All tunable parameters are in game_config.yaml.
"""
