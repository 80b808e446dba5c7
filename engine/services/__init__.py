"""Service layer for the challenge engine.

Layer hierarchy:
    Callers (UI / queries) -> challenge_service -> Repositories (stores)
                                   |
                                   v
    Pure calculators: progression, streaks, achievements, stats

Calculators should:
- Take every input explicitly (history, totals, "today", the challenge)
- Return pydantic result models that serialize to plain JSON
- Never log, read configuration, or touch a store

challenge_service is the only module that calls repositories or logs.
"""
