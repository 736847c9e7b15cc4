"""
FastAPI backend for the weather demo.

Schemas (Pydantic DTOs), routes, middleware, error handling, and the
cache-aside services behind them.
"""
