"""
Funções auxiliares para routers: IP do cliente, busca com 404 e
checagem de acesso por dono/papel.
"""
import ipaddress
import os
from typing import Any, Iterable, List, Optional, Union

from fastapi import HTTPException, Request, status

from config import Messages
from logging_config import get_logger

logger = get_logger(__name__)

# Ex: TRUSTED_PROXIES=10.0.0.0/8,172.16.0.0/12
_TRUSTED_PROXY_NETWORKS: List[Union[ipaddress.IPv4Network, ipaddress.IPv6Network]] = []

for _network_str in os.environ.get("TRUSTED_PROXIES", "").split(","):
    _network_str = _network_str.strip()
    if not _network_str:
        continue
    try:
        _TRUSTED_PROXY_NETWORKS.append(ipaddress.ip_network(_network_str, strict=False))
    except ValueError as e:
        logger.warning(f"Rede de proxy inválida ignorada: {_network_str} - {e}")


def _is_trusted_proxy(ip: str) -> bool:
    if not _TRUSTED_PROXY_NETWORKS:
        return False
    try:
        ip_addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return any(ip_addr in network for network in _TRUSTED_PROXY_NETWORKS)


def _first_valid_ip(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    candidate = value.split(",")[0].strip()
    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        logger.warning(f"IP de proxy inválido: {candidate}")
        return None
    return candidate


def get_client_ip_safe(request: Request) -> str:
    """
    IP do cliente. Headers X-Forwarded-For / X-Real-IP só são
    considerados quando a conexão vem de um proxy em TRUSTED_PROXIES.
    """
    direct_ip = request.client.host if request.client else "unknown"
    if not _is_trusted_proxy(direct_ip):
        return direct_ip

    return (
        _first_valid_ip(request.headers.get("X-Forwarded-For"))
        or _first_valid_ip(request.headers.get("X-Real-IP"))
        or direct_ip
    )


def ensure_owner_or_roles(
    current_user: Any,
    owner_id: Optional[int],
    roles: Iterable[str] = (),
    detail: str = Messages.ACCESS_DENIED,
) -> None:
    """Levanta 403 se o usuário não for o dono nem tiver um dos papéis."""
    if current_user.id == owner_id or current_user.role in roles:
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
