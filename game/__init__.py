"""Core game domain package for the tongue twister game.

- Scoring and verdicts (`scoring`, `evaluator`)
- The session value and its transitions (`models`, `session`)
- The round timeline state machine and its timers (`timeline`, `scheduler`, `events`)
- Per-browser-session state (`state_manager`)
"""
