"""
Análise de risco a partir do dossiê DirectData.

Pontuação de risco:
    score < 400: +3 | score < 600: +2 | score < 800: +1
    protestos: +2 | ações judiciais: +2 | recuperação judicial/falência: +3
Nível: >= 6 ALTO, >= 3 MÉDIO, abaixo disso BAIXO.
"""
import math
from typing import Any, Dict, List, Optional

from utils.documentos_br import only_digits


class ScoreCategory:
    EXCELLENT = "Excelente"
    GOOD = "Bom"
    REGULAR = "Regular"
    LOW = "Baixo"


class RiskLevel:
    HIGH = "ALTO"
    MEDIUM = "MÉDIO"
    LOW = "BAIXO"

    ALL = [LOW, MEDIUM, HIGH]


def categorize_score(score: Optional[int]) -> str:
    score = score or 0
    if score >= 800:
        return ScoreCategory.EXCELLENT
    if score >= 600:
        return ScoreCategory.GOOD
    if score >= 400:
        return ScoreCategory.REGULAR
    return ScoreCategory.LOW


def risk_points(score: Optional[int], protestos: int, acoes: int, recuperacoes: int) -> int:
    score = score or 0
    points = 0
    if score < 400:
        points += 3
    elif score < 600:
        points += 2
    elif score < 800:
        points += 1
    if protestos > 0:
        points += 2
    if acoes > 0:
        points += 2
    if recuperacoes > 0:
        points += 3
    return points


def classify_risk(points: int) -> str:
    if points >= 6:
        return RiskLevel.HIGH
    if points >= 3:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _to_float(value: Any) -> Optional[float]:
    """Valores numéricos do bureau podem vir como texto (ex: "1.234,56" ou "750.5")."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if "," in text and text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_score(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


def _sum_values(items: List[Dict[str, Any]], key: str) -> float:
    return sum((_to_float(item.get(key)) or 0.0) for item in items if isinstance(item, dict))


def analyze_dossie(cnpj: str, dossie: Dict[str, Any]) -> Dict[str, Any]:
    """
    Resume o dossiê no formato de CreditBureauResponse.

    Campos ausentes na resposta do bureau são tratados como vazios; um
    dossiê sem score cai na categoria Baixo.
    """
    retorno = dossie.get("retorno") or {}
    entidade = retorno.get("entidadeJuridica") or {}
    cadastro = entidade.get("dadosCadastrais") or {}
    score_entidades = entidade.get("scoreEntidades") or {}
    score_pj = score_entidades.get("entidadeJuridica") or {}
    pendencias = entidade.get("pendenciaFinanceira") or {}

    protestos = _list(pendencias.get("protestos"))
    acoes = _list(pendencias.get("acoesJudiciais"))
    recuperacoes = _list(pendencias.get("recuperacoesJudiciaisFalencia"))
    cheques = _list(pendencias.get("chequesSemFundo"))

    score = parse_score(score_pj.get("score"))
    points = risk_points(score, len(protestos), len(acoes), len(recuperacoes))
    situacao = cadastro.get("situacaoCadastral")

    return {
        "cnpj": only_digits(retorno.get("documentoConsultado") or cnpj),
        "razao_social": cadastro.get("razaoSocial"),
        "score": score,
        "categoria_score": categorize_score(score),
        "nivel_risco": classify_risk(points),
        "pontos_risco": points,
        "protestos": len(protestos),
        "acoes_judiciais": len(acoes),
        "recuperacoes_judiciais": len(recuperacoes),
        "dados": {
            "nome_fantasia": cadastro.get("nomeFantasia"),
            "situacao_cadastral": situacao,
            "ativa": situacao == "ATIVA",
            "natureza_juridica": cadastro.get("naturezaJuridica"),
            "data_fundacao": cadastro.get("dataFundacao"),
            "atividade_principal": cadastro.get("descricaoAtividadePrincipal"),
            "capital_social": (entidade.get("quadroSocietario") or {}).get("capitalSocial"),
            "motivos_score": _list(score_pj.get("motivos")),
            "total_pendencia": pendencias.get("totalPendencia"),
            "valor_protestos": _sum_values(protestos, "valorTotal"),
            "valor_acoes": _sum_values(acoes, "valor"),
            "valor_recuperacoes": _sum_values(recuperacoes, "valor"),
            "cheques_sem_fundo": len(cheques),
            "consultas": {
                k: (entidade.get("consulta") or {}).get(k)
                for k in ("ultimos30Dias", "ultimos60Dias", "ultimos90Dias", "mais90Dias")
            },
            "socios": _list((entidade.get("quadroSocietario") or {}).get("informacoes")),
        },
    }
