"""
Endpoints de autenticação do Spark Comex.

Cadastro de importadores, login com JWT e manutenção do perfil.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from auth import (
    authenticate_user,
    create_access_token,
    get_current_active_user,
    get_password_hash,
    get_user_by_email,
    verify_password,
)
from config import Messages
from database import get_db
from logging_config import get_logger, log_action
from models.usuario import UserRole, Usuario
from repositories.usuario_repository import usuario_repository
from schemas import (
    LoginRequest,
    Mensagem,
    PasswordPolicy,
    PasswordRequirementsResponse,
    Token,
    UsuarioCreate,
    UsuarioResponse,
    UsuarioUpdate,
)
from schemas.usuario import PasswordChange
from services.audit_service import AuditAction, audit_service
from utils.http_helpers import get_client_ip_safe
from utils.password_validator import get_password_policy, get_password_requirements, validate_password

logger = get_logger('routers.auth')

router = APIRouter(prefix="/auth", tags=["Autenticação"])


def _check_password_policy(senha: str) -> None:
    is_valid, errors = validate_password(senha)
    if not is_valid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="; ".join(errors)
        )


@router.get(
    "/password-requirements",
    response_model=PasswordRequirementsResponse,
    summary="Obter requisitos de senha",
)
def get_password_requirements_info() -> PasswordRequirementsResponse:
    """
    Retorna os requisitos de complexidade de senha para exibição no frontend,
    usados no cadastro e na troca de senha.
    """
    return PasswordRequirementsResponse(
        requisitos=get_password_requirements(),
        policy=PasswordPolicy(**get_password_policy())
    )


@router.post(
    "/register",
    response_model=UsuarioResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar importador",
    responses={
        201: {"description": "Importador cadastrado"},
        400: {"description": "Email/CNPJ já cadastrado ou senha fora da política"},
        422: {"description": "CNPJ inválido ou senhas não conferem"},
    }
)
def register_user(usuario: UsuarioCreate, db: Session = Depends(get_db)):
    """
    Cadastra uma empresa importadora.

    **Fluxo:**
    1. Valida CNPJ (dígitos verificadores) e confirmação de senha no schema
    2. Valida complexidade da senha
    3. Recusa email ou CNPJ já cadastrados
    4. Cria o usuário com papel `importer`
    """
    _check_password_policy(usuario.senha)

    if usuario_repository.get_by_email(db, usuario.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.EMAIL_EXISTS)
    if usuario_repository.get_by_cnpj(db, usuario.cnpj):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.CNPJ_EXISTS)

    novo_usuario = usuario_repository.create(db, Usuario(
        email=usuario.email,
        nome=usuario.nome,
        razao_social=usuario.razao_social,
        cnpj=usuario.cnpj,
        telefone=usuario.telefone,
        senha_hash=get_password_hash(usuario.senha),
        role=UserRole.IMPORTER,
    ))

    log_action(
        logger, "user_registered",
        user_id=novo_usuario.id,
        resource_type="usuario",
        resource_id=novo_usuario.id,
    )
    return novo_usuario


@router.post(
    "/login",
    response_model=Token,
    summary="Login",
    responses={
        200: {"description": "Login realizado com sucesso"},
        401: {"description": "Credenciais inválidas"},
        403: {"description": "Usuário inativo"},
        423: {"description": "Conta bloqueada por tentativas falhas"},
    }
)
def login(credentials: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """
    Autentica com email e senha e devolve um Bearer token.

    **Segurança:** a mensagem de erro é a mesma para email inexistente e
    senha errada. Após MAX_FAILED_LOGIN_ATTEMPTS falhas a conta fica
    bloqueada (HTTP 423) por ACCOUNT_LOCKOUT_MINUTES.
    """
    ip_address = get_client_ip_safe(request)
    try:
        user = authenticate_user(db, credentials.email, credentials.senha)
    except HTTPException as e:
        if e.status_code == status.HTTP_423_LOCKED:
            locked = get_user_by_email(db, credentials.email)
            if locked:
                audit_service.log_action(
                    db=db, user_id=locked.id, action=AuditAction.LOGIN_BLOCKED,
                    resource_type="auth", ip_address=ip_address,
                )
        raise

    if not user:
        known = get_user_by_email(db, credentials.email)
        if known:
            audit_service.log_action(
                db=db, user_id=known.id, action=AuditAction.LOGIN_FAILED,
                resource_type="auth", ip_address=ip_address,
            )
        logger.warning("[AUTH] Login falhou: credenciais invalidas")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=Messages.INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        log_action(logger, "login_blocked", user_id=user.id, resource_type="auth", reason="inactive")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=Messages.USER_INACTIVE)

    audit_service.log_action(
        db=db, user_id=user.id, action=AuditAction.LOGIN_SUCCESS,
        resource_type="auth", ip_address=ip_address,
    )
    log_action(logger, "login_success", user_id=user.id, resource_type="auth")

    return Token(
        access_token=create_access_token({"sub": user.email, "role": user.role}),
        token_type="bearer"
    )


@router.get(
    "/me",
    response_model=UsuarioResponse,
    summary="Obter dados do usuário atual",
)
def get_current_user_info(current_user: Usuario = Depends(get_current_active_user)):
    return current_user


@router.put(
    "/me",
    response_model=UsuarioResponse,
    summary="Atualizar perfil do usuário",
)
def update_profile(
    dados: UsuarioUpdate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Atualiza nome, razão social e telefone. Email e CNPJ não mudam pelo
    perfil.
    """
    usuario_repository.update(db, current_user, dados.model_dump(exclude_unset=True))

    log_action(
        logger, "profile_updated",
        user_id=current_user.id,
        resource_type="usuario",
        resource_id=current_user.id,
    )
    return current_user


@router.post(
    "/change-password",
    response_model=Mensagem,
    summary="Alterar senha",
    responses={400: {"description": "Senha atual incorreta ou nova senha fora da política"}},
)
def change_password(
    dados: PasswordChange,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    if not verify_password(dados.senha_atual, current_user.senha_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.WRONG_PASSWORD)
    _check_password_policy(dados.nova_senha)

    current_user.senha_hash = get_password_hash(dados.nova_senha)
    db.commit()

    log_action(logger, "password_changed", user_id=current_user.id, resource_type="usuario")
    return Mensagem(mensagem=Messages.PASSWORD_CHANGED, sucesso=True)
