"""Aggregation module for survey analytics.

- Reduces response snapshots into distributions, rankings and counts
- Renders aggregation bundles as downloadable reports
- Forbidden: database access, record mutation
"""
