"""
Core module shared by every app.

This module contains:
- Service result envelope and input parsing
- Domain events, exceptions and value objects
- Event bus, cache, audit log and instrumentation
- Middleware and operational endpoints
"""
