"""
Valores padrao do sistema Spark Comex.

Centraliza constantes de configuracao padrao para evitar
hardcoding em multiplos lugares do codigo.
"""

# === Admin Defaults ===
# Usados no seed.py quando variaveis de ambiente nao estao definidas
DEFAULT_ADMIN_EMAIL = "admin@sparkcomex.com.br"
DEFAULT_ADMIN_NAME = "Administrador"
DEFAULT_ADMIN_COMPANY = "Spark Comex"
# NOTA: Nao ha DEFAULT_ADMIN_PASSWORD - senha DEVE ser definida via .env

# === Validacao de Senha ===
MIN_PASSWORD_LENGTH = 8

# === Paginacao ===
DEFAULT_PAGE = 1

# === Moeda ===
DEFAULT_CURRENCY = "USD"
