"""Consulta ao bureau de crédito DirectData e análise de risco."""
from .analysis import RiskLevel, ScoreCategory, analyze_dossie, categorize_score, classify_risk, risk_points
from .client import DirectDataClient

__all__ = [
    "DirectDataClient",
    "RiskLevel",
    "ScoreCategory",
    "analyze_dossie",
    "categorize_score",
    "classify_risk",
    "risk_points",
]
