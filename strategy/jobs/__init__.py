# PATH: strategy/jobs/__init__.py
"""
Strategy jobs package.

Available entry points:
    python -m strategy.jobs.run_watch watch    # Poll venues, record opportunities
    python -m strategy.jobs.run_watch history  # Show recorded opportunities

NOTE: This __init__.py intentionally does NOT import run_watch, which installs
signal handlers and loads .env when run. Import it directly when needed:

    from strategy.jobs.run_watch import run_cycle
"""

__all__: list[str] = []
