"""
Cria o usuário administrador inicial.
Execute após aplicar as migrações (alembic upgrade head).

Uso:
    python seed.py

Variáveis: ADMIN_EMAIL, ADMIN_PASSWORD (obrigatória), ADMIN_NAME,
ADMIN_COMPANY e ADMIN_CNPJ.
"""
import os
from typing import Optional

from dotenv import load_dotenv

from auth import get_password_hash
from config.defaults import (
    DEFAULT_ADMIN_COMPANY,
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_NAME,
    MIN_PASSWORD_LENGTH,
)
from database import get_db_session
from logging_config import get_logger
from models import UserRole, Usuario
from utils.password_validator import validate_password

logger = get_logger('seed')

load_dotenv()

# CNPJ de preenchimento; a coluna é obrigatória e única
PLACEHOLDER_ADMIN_CNPJ = "00000000000191"


def create_admin() -> Optional[Usuario]:
    """Cria o admin se ainda não existir. Retorna o usuário criado."""
    admin_email = os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL).strip().lower()
    admin_password = os.getenv("ADMIN_PASSWORD")

    if not admin_password:
        logger.error("ADMIN_PASSWORD não definida no .env")
        logger.info(f"Defina uma senha forte com pelo menos {MIN_PASSWORD_LENGTH} caracteres.")
        return None

    is_valid, errors = validate_password(admin_password)
    if not is_valid:
        logger.error(f"ADMIN_PASSWORD inválida: {'; '.join(errors)}")
        return None

    with get_db_session() as db:
        existing = db.query(Usuario).filter(Usuario.email == admin_email).first()
        if existing:
            logger.info(f"Administrador já existe: {admin_email}")
            return None

        admin = Usuario(
            email=admin_email,
            nome=os.getenv("ADMIN_NAME", DEFAULT_ADMIN_NAME),
            razao_social=os.getenv("ADMIN_COMPANY", DEFAULT_ADMIN_COMPANY),
            cnpj=os.getenv("ADMIN_CNPJ", PLACEHOLDER_ADMIN_CNPJ),
            senha_hash=get_password_hash(admin_password),
            role=UserRole.ADMIN,
            is_active=True,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

    logger.info(f"Administrador criado com sucesso: {admin_email}")
    logger.warning("IMPORTANTE: Altere a senha após o primeiro login!")
    return admin


if __name__ == "__main__":
    create_admin()
