"""Middlewares HTTP."""
