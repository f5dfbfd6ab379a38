"""Routers da API Spark Comex."""
