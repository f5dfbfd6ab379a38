"""
Pipeline de acompanhamento das importações.

As etapas são fixas e ordenadas; o estado de cada uma fica no JSON
`Importacao.etapas`, indexado pelo nome da etapa, e `etapa_atual` aponta
para a etapa em que a operação se encontra.
"""
from typing import Any, Dict, List, Optional

from exceptions import ValidationError
from models.importacao import Importacao
from utils.dates import utcnow


class StageStatus:
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DELAYED = "delayed"
    CANCELLED = "cancelled"
    ALL = [PENDING, IN_PROGRESS, COMPLETED, DELAYED, CANCELLED]


STAGES: List[str] = [
    "estimativa",
    "invoice",
    "producao",
    "embarque",
    "transporte",
    "atracacao",
    "desembaraco",
    "transporte_terrestre",
    "entrega",
]

STAGE_LABELS: Dict[str, str] = {
    "estimativa": "Estimativa",
    "invoice": "Invoice",
    "producao": "Produção",
    "embarque": "Embarque",
    "transporte": "Transporte Internacional",
    "atracacao": "Atracação",
    "desembaraco": "Desembaraço",
    "transporte_terrestre": "Transporte Terrestre",
    "entrega": "Entrega",
}

INITIAL_STAGE = STAGES[0]


def validate_stage(etapa: str, status: Optional[str] = None) -> None:
    if etapa not in STAGES:
        raise ValidationError(f"Etapa do pipeline inválida: {etapa}")
    if status is not None and status not in StageStatus.ALL:
        raise ValidationError(f"Status de etapa inválido: {status}")


def get_stage_data(importacao: Importacao, etapa: str) -> Dict[str, Any]:
    return dict((importacao.etapas or {}).get(etapa) or {})


def get_stage_status(importacao: Importacao, etapa: str) -> str:
    return get_stage_data(importacao, etapa).get("status", StageStatus.PENDING)


def update_stage(
    importacao: Importacao,
    etapa: str,
    status: str,
    dados: Optional[Dict[str, Any]] = None,
    avancar: bool = True,
) -> Dict[str, Any]:
    """
    Grava o estado de uma etapa e, se `avancar`, move `etapa_atual` para ela.

    Datas de início/fim são preenchidas quando a etapa entra em andamento
    ou é concluída. Não faz commit.
    """
    validate_stage(etapa, status)

    stage = get_stage_data(importacao, etapa)
    stage.update(dados or {})
    stage["status"] = status
    now = utcnow().isoformat()
    if status == StageStatus.IN_PROGRESS:
        stage.setdefault("iniciado_em", now)
    elif status == StageStatus.COMPLETED:
        stage.setdefault("iniciado_em", now)
        stage["concluido_em"] = now
    stage["atualizado_em"] = now

    # Novo dict para o SQLAlchemy detectar a mudança no JSON
    etapas = dict(importacao.etapas or {})
    etapas[etapa] = stage
    importacao.etapas = etapas
    if avancar:
        importacao.etapa_atual = etapa
    return stage


def progress(importacao: Importacao) -> float:
    """Percentual de etapas concluídas (0 a 100)."""
    done = sum(1 for etapa in STAGES if get_stage_status(importacao, etapa) == StageStatus.COMPLETED)
    return round(done * 100.0 / len(STAGES), 2)


def cancel_pending_stages(importacao: Importacao) -> None:
    """Marca como canceladas as etapas ainda não concluídas."""
    etapas = dict(importacao.etapas or {})
    for etapa in STAGES:
        stage = dict(etapas.get(etapa) or {})
        if stage.get("status") != StageStatus.COMPLETED:
            stage["status"] = StageStatus.CANCELLED
            etapas[etapa] = stage
    importacao.etapas = etapas


def build_pipeline(importacao: Importacao) -> Dict[str, Any]:
    """Visão do pipeline para GET /imports/{id}/pipeline."""
    etapa_atual = importacao.etapa_atual or INITIAL_STAGE
    return {
        "importacao_id": importacao.id,
        "etapa_atual": etapa_atual,
        "progresso": progress(importacao),
        "etapas": [
            {
                "etapa": etapa,
                "label": STAGE_LABELS[etapa],
                "status": get_stage_status(importacao, etapa),
                "dados": get_stage_data(importacao, etapa),
                "atual": etapa == etapa_atual,
            }
            for etapa in STAGES
        ],
    }
