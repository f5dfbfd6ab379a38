"""
Routers base com autenticação integrada.

Cada classe aplica a dependência de autenticação/papel a todos os
endpoints do router.
"""

from fastapi import APIRouter, Depends

from auth import (
    get_current_active_user,
    get_current_admin_user,
    get_current_customs_broker_user,
    get_current_financeira_user,
)


class AuthenticatedRouter(APIRouter):
    """
    Router que requer usuário autenticado e ativo.

    Exemplo:
        router = AuthenticatedRouter(prefix="/imports", tags=["Importações"])

        @router.get("/")
        def list_imports(current_user: Usuario = Depends(get_current_active_user)):
            ...
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dependencies = [Depends(get_current_active_user)]


class AdminRouter(APIRouter):
    """Router que requer usuário administrador."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dependencies = [Depends(get_current_admin_user)]


class FinanceiraRouter(APIRouter):
    """Router restrito ao papel financeira."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dependencies = [Depends(get_current_financeira_user)]


class CustomsBrokerRouter(APIRouter):

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dependencies = [Depends(get_current_customs_broker_user)]
