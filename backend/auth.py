"""
Módulo de autenticação do Spark Comex.

JWT próprio (python-jose) com senhas em bcrypt, bloqueio de conta após
tentativas falhas e dependências de papel para os routers.
"""
from datetime import timedelta
from typing import Callable, Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from config import ACCESS_TOKEN_EXPIRE_MINUTES, Messages, SECRET_KEY
from config import JWT_ALGORITHM as ALGORITHM
from config.security import ACCOUNT_LOCKOUT_MINUTES, MAX_FAILED_LOGIN_ATTEMPTS
from database import get_db
from logging_config import get_logger
from models.usuario import UserRole, Usuario
from utils.dates import as_utc, utcnow

logger = get_logger('auth')

security = HTTPBearer(auto_error=False)


# === Bloqueio de Conta ===

def is_account_locked(user: Usuario) -> bool:
    """
    Verifica se a conta do usuario esta bloqueada.

    Args:
        user: Usuario a verificar

    Returns:
        True se a conta esta bloqueada, False caso contrario
    """
    if not user.locked_until:
        return False
    return utcnow() < as_utc(user.locked_until)


def get_lockout_remaining_seconds(user: Usuario) -> int:
    """Segundos restantes de bloqueio (0 se nao esta bloqueado)."""
    if not user.locked_until:
        return 0
    remaining = as_utc(user.locked_until) - utcnow()
    return max(0, int(remaining.total_seconds()))


def record_failed_login(db: Session, user: Usuario) -> None:
    """
    Registra uma tentativa de login falha.
    Bloqueia a conta se atingir o limite de tentativas.
    """
    user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
    if user.failed_login_attempts >= MAX_FAILED_LOGIN_ATTEMPTS:
        user.locked_until = utcnow() + timedelta(minutes=ACCOUNT_LOCKOUT_MINUTES)
        logger.warning(f"[AUTH] Conta bloqueada apos {user.failed_login_attempts} tentativas: user={user.id}")
    db.commit()


def reset_failed_attempts(db: Session, user: Usuario) -> None:
    """Reseta o contador de tentativas falhas apos login bem sucedido."""
    if user.failed_login_attempts or user.locked_until is not None:
        user.failed_login_attempts = 0
        user.locked_until = None
        db.commit()


# === Senhas ===

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica se a senha em texto plano corresponde ao hash."""
    if not hashed_password:
        return False
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8")
    )


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt()
    ).decode("utf-8")


# === Token JWT ===

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_user_by_email(db: Session, email: str) -> Optional[Usuario]:
    return db.query(Usuario).filter(Usuario.email == email).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[Usuario]:
    """
    Autentica usuario verificando email e senha.
    Implementa bloqueio de conta apos tentativas falhas.

    Returns:
        Usuario se autenticado com sucesso, None caso contrario

    Raises:
        HTTPException: 423 se a conta estiver bloqueada
    """
    user = get_user_by_email(db, email)
    if not user:
        return None

    if is_account_locked(user):
        minutes = get_lockout_remaining_seconds(user) // 60
        raise HTTPException(
            status_code=status.HTTP_423_LOCKED,
            detail=f"Conta bloqueada por muitas tentativas falhas. Tente novamente em {minutes + 1} minuto(s)."
        )

    if not verify_password(password, user.senha_hash):
        record_failed_login(db, user)
        return None

    reset_failed_attempts(db, user)
    return user


def _decode_token(token: str, db: Session) -> Optional[Usuario]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    email = payload.get("sub")
    if email is None:
        return None
    return get_user_by_email(db, email=email)


# === Dependencies ===

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Usuario:
    """
    Dependency para obter o usuário atual a partir do Bearer token.

    Raises:
        HTTPException: 401 se não autenticado ou token inválido
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=Messages.INVALID_TOKEN,
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not credentials:
        raise credentials_exception

    user = _decode_token(credentials.credentials, db)
    if not user:
        raise credentials_exception
    return user


async def get_current_active_user(
    current_user: Usuario = Depends(get_current_user)
) -> Usuario:
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=Messages.USER_INACTIVE
        )
    return current_user


def require_roles(*roles: str, detail: str = Messages.ACCESS_DENIED) -> Callable:
    """
    Fábrica de dependency que exige um dos papéis informados.

        @router.get("/", dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.FINANCEIRA))])
    """
    async def dependency(current_user: Usuario = Depends(get_current_active_user)) -> Usuario:
        if current_user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return current_user

    return dependency


async def get_current_admin_user(
    current_user: Usuario = Depends(get_current_active_user)
) -> Usuario:
    """Verifica se o usuário é administrador."""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=Messages.ADMIN_REQUIRED
        )
    return current_user


async def get_current_financeira_user(
    current_user: Usuario = Depends(get_current_active_user)
) -> Usuario:
    if current_user.role != UserRole.FINANCEIRA:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=Messages.FINANCEIRA_REQUIRED
        )
    return current_user


async def get_current_customs_broker_user(
    current_user: Usuario = Depends(get_current_active_user)
) -> Usuario:
    if current_user.role != UserRole.CUSTOMS_BROKER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=Messages.CUSTOMS_BROKER_REQUIRED
        )
    return current_user
