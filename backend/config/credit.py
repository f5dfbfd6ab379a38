"""
Parametros de negocio de credito e pagamentos.
"""
import os
from decimal import Decimal

from .base import env_float

# Percentual de entrada cobrado sobre o valor FOB da importacao
DEFAULT_DOWN_PAYMENT_PERCENT = Decimal(str(env_float("DEFAULT_DOWN_PAYMENT_PERCENT", 30.0)))

# Taxa administrativa padrao (percentual sobre o valor financiado)
DEFAULT_ADMIN_FEE_PERCENT = Decimal(str(env_float("DEFAULT_ADMIN_FEE_PERCENT", 0.0)))

# Prazos em dias das parcelas apos a entrada
DEFAULT_PAYMENT_TERMS = os.getenv("DEFAULT_PAYMENT_TERMS", "30,60,90,120")


# === Bureau de credito (DirectData) ===
DIRECTD_API_URL = os.getenv("DIRECTD_API_URL", "https://apiv3.directd.com.br")
DIRECTD_API_TOKEN = os.getenv("DIRECTD_API_TOKEN", "")
DIRECTD_TIMEOUT_SECONDS = env_float("DIRECTD_TIMEOUT_SECONDS", 30.0)
DIRECTD_USER_AGENT = "Spark-Comex/1.0"
