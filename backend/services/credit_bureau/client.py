"""Cliente HTTP para a API DirectData (dossiê de crédito de CNPJ)."""
import logging
from typing import Any, Dict, Optional

import httpx

from config.credit import (
    DIRECTD_API_TOKEN,
    DIRECTD_API_URL,
    DIRECTD_TIMEOUT_SECONDS,
    DIRECTD_USER_AGENT,
)
from exceptions import CreditBureauError, CreditBureauNotConfiguredError
from logging_config import get_logger, log_timing
from services.cache import get_cache
from services.metrics import record_bureau_request
from utils.documentos_br import only_digits

logger = get_logger("services.credit_bureau.client")

CACHE_TTL_SECONDS = 6 * 60 * 60


class DirectDataClient:
    """
    Uso:
        client = DirectDataClient()
        dossie = await client.consultar_dossie("11.222.333/0001-81")

    Respostas são guardadas no cache por CNPJ e endpoint.
    """

    DOSSIE_ENDPOINT = "DossieCreditoCompleto"
    CADASTRO_ENDPOINT = "CadastroPessoaJuridicaPlus"

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DIRECTD_API_URL,
        timeout: float = DIRECTD_TIMEOUT_SECONDS,
        use_cache: bool = True,
    ):
        self.token = DIRECTD_API_TOKEN if token is None else token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.use_cache = use_cache

    @property
    def configured(self) -> bool:
        return bool(self.token)

    async def consultar_dossie(self, cnpj: str) -> Dict[str, Any]:
        """Dossiê de crédito completo (score, pendências, sócios)."""
        return await self._get(self.DOSSIE_ENDPOINT, cnpj)

    async def consultar_cadastro(self, cnpj: str) -> Dict[str, Any]:
        """Dados cadastrais da Receita para o CNPJ."""
        return await self._get(self.CADASTRO_ENDPOINT, cnpj)

    async def _get(self, endpoint: str, cnpj: str) -> Dict[str, Any]:
        if not self.configured:
            raise CreditBureauNotConfiguredError()

        cnpj_limpo = only_digits(cnpj)
        cache_key = f"bureau:{endpoint}:{cnpj_limpo}"
        if self.use_cache:
            cached = get_cache().get(cache_key)
            if cached is not None:
                record_bureau_request(endpoint, "cached")
                return cached

        url = f"{self.base_url}/api/{endpoint}"
        params = {"CNPJ": cnpj_limpo, "TOKEN": self.token}
        headers = {"Content-Type": "application/json", "User-Agent": DIRECTD_USER_AGENT}

        logger.info(f"[DirectData] Consultando {endpoint} para CNPJ {cnpj_limpo}")
        try:
            with log_timing(logger, f"directdata_{endpoint}", level=logging.INFO):
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params, headers=headers)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, httpx.TimeoutException) as e:
            record_bureau_request(endpoint, "error")
            logger.warning(f"[DirectData] Falha em {endpoint} para {cnpj_limpo}: {e}")
            raise CreditBureauError(str(e)) from e
        except ValueError as e:
            record_bureau_request(endpoint, "error")
            raise CreditBureauError("Resposta inválida do bureau") from e

        meta = data.get("metaDados") or {}
        logger.info(
            f"[DirectData] {endpoint} concluído: resultado={meta.get('resultado')} "
            f"tempo={meta.get('tempoExecucaoMs')}ms"
        )
        record_bureau_request(endpoint, "success")
        if self.use_cache:
            get_cache().set(cache_key, data, ttl=CACHE_TTL_SECONDS)
        return data

