"""API module for OpenSurvey.

- Validates inputs, reads/writes DB
- Returns payloads for UI
- Forbidden: aggregation logic beyond calling the aggregator
"""
