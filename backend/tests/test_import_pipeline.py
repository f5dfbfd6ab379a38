"""
Testes do pipeline de acompanhamento das importações.
"""
import pytest

from exceptions import ValidationError
from models import Importacao
from services import import_pipeline
from services.import_pipeline import StageStatus


def _importacao() -> Importacao:
    return Importacao(id=1, nome="Teste", etapa_atual=import_pipeline.INITIAL_STAGE, etapas={})


class TestUpdateStage:

    def test_in_progress_sets_start(self):
        importacao = _importacao()
        stage = import_pipeline.update_stage(importacao, "producao", StageStatus.IN_PROGRESS)

        assert stage["status"] == StageStatus.IN_PROGRESS
        assert "iniciado_em" in stage
        assert "concluido_em" not in stage
        assert importacao.etapa_atual == "producao"

    def test_completed_sets_end(self):
        importacao = _importacao()
        import_pipeline.update_stage(importacao, "invoice", StageStatus.IN_PROGRESS)
        stage = import_pipeline.update_stage(importacao, "invoice", StageStatus.COMPLETED)

        assert stage["concluido_em"] >= stage["iniciado_em"]

    def test_merges_data(self):
        importacao = _importacao()
        import_pipeline.update_stage(importacao, "embarque", StageStatus.IN_PROGRESS, {"navio": "MSC Anna"})
        import_pipeline.update_stage(importacao, "embarque", StageStatus.DELAYED, {"motivo": "greve"})

        dados = import_pipeline.get_stage_data(importacao, "embarque")
        assert dados["navio"] == "MSC Anna"
        assert dados["motivo"] == "greve"
        assert dados["status"] == StageStatus.DELAYED

    def test_without_advancing(self):
        importacao = _importacao()
        import_pipeline.update_stage(importacao, "entrega", StageStatus.PENDING, avancar=False)
        assert importacao.etapa_atual == import_pipeline.INITIAL_STAGE

    def test_replaces_json_dict(self):
        importacao = _importacao()
        original = importacao.etapas
        import_pipeline.update_stage(importacao, "producao", StageStatus.IN_PROGRESS)
        assert importacao.etapas is not original

    @pytest.mark.parametrize("etapa,status", [
        ("alfandega", StageStatus.IN_PROGRESS),
        ("producao", "parado"),
    ])
    def test_invalid(self, etapa, status):
        with pytest.raises(ValidationError):
            import_pipeline.update_stage(_importacao(), etapa, status)


class TestProgress:

    def test_empty(self):
        assert import_pipeline.progress(_importacao()) == 0.0

    def test_partial(self):
        importacao = _importacao()
        for etapa in import_pipeline.STAGES[:3]:
            import_pipeline.update_stage(importacao, etapa, StageStatus.COMPLETED)
        assert import_pipeline.progress(importacao) == 33.33

    def test_unknown_stage_defaults_to_pending(self):
        assert import_pipeline.get_stage_status(_importacao(), "transporte") == StageStatus.PENDING


class TestCancelPendingStages:

    def test_keeps_completed(self):
        importacao = _importacao()
        import_pipeline.update_stage(importacao, "estimativa", StageStatus.COMPLETED)
        import_pipeline.cancel_pending_stages(importacao)

        assert import_pipeline.get_stage_status(importacao, "estimativa") == StageStatus.COMPLETED
        assert import_pipeline.get_stage_status(importacao, "entrega") == StageStatus.CANCELLED


class TestBuildPipeline:

    def test_structure(self):
        importacao = _importacao()
        import_pipeline.update_stage(importacao, "invoice", StageStatus.IN_PROGRESS)

        pipeline = import_pipeline.build_pipeline(importacao)

        assert pipeline["importacao_id"] == 1
        assert pipeline["etapa_atual"] == "invoice"
        assert [e["etapa"] for e in pipeline["etapas"]] == import_pipeline.STAGES
        atual = [e for e in pipeline["etapas"] if e["atual"]]
        assert len(atual) == 1
        assert atual[0]["label"] == "Invoice"
        assert atual[0]["status"] == StageStatus.IN_PROGRESS
