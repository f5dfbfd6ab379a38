"""
Configuracoes da API REST do Spark Comex.
"""
import os

API_VERSION = os.getenv("API_VERSION", "1.0.0")
API_PREFIX = os.getenv("API_PREFIX", "/api")
