"""
Plan subsystem.

Components:
- plan_models.py: data structures (Plan, Priority, Category, Status, FilterCriteria)
- plan_store.py: SQLite-backed owner-scoped storage
- plan_filters.py: dashboard filter/sort pipeline
- plan_stats.py: summary counters and analytics breakdowns
- plan_service.py: owner-scoped operations used by the HTTP layer
"""
