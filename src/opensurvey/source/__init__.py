"""Data source boundary.

- Fetches raw survey responses through the repository
- Memoises fetches in an injected ResponseCache
- Reports failures as Unavailable instead of raising
"""
