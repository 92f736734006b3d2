"""
Core application utilities.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with correlation-id context
- Domain error types shared by repositories and the procedure router
- Dependency helpers for the HTTP adapter
"""
