"""
Regras de negócio das importações.

Centraliza criação, edição, mudança de status, cancelamento, produtos,
documentos de embarque e despachante, mantendo coerentes o valor total, o uso de crédito, o cronograma de
pagamentos, o pipeline e a linha do tempo.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from config.documents import MANDATORY_IMPORT_DOCUMENTS
from config.messages import Messages
from exceptions import BusinessRuleError, RecordNotFoundError, ValidationError
from logging_config import get_logger, log_action
from models.importacao import (
    DocumentoImportacao,
    HistoricoImportacao,
    Importacao,
    ImportDocumentStatus,
    ImportStatus,
    ProdutoImportacao,
)
from models.pagamento import PaymentStatus
from models.usuario import UserRole
from repositories.fornecedor_repository import fornecedor_repository
from repositories.importacao_repository import produto_repository
from repositories.usuario_repository import usuario_repository
from schemas.importacao import ImportacaoCreate, ImportacaoUpdate, ProdutoCreate, ProdutoUpdate
from services import credit_service, import_pipeline, payment_schedule
from services.import_pipeline import StageStatus
from services.metrics import record_import_event
from utils.dates import utcnow

logger = get_logger("services.imports")

# Etapa do pipeline correspondente a cada status operacional
STATUS_STAGE: Dict[str, str] = {
    ImportStatus.PRODUCAO: "producao",
    ImportStatus.ENTREGUE_AGENTE: "embarque",
    ImportStatus.TRANSPORTE_MARITIMO: "transporte",
    ImportStatus.TRANSPORTE_AEREO: "transporte",
    ImportStatus.DESEMBARACO: "desembaraco",
    ImportStatus.TRANSPORTE_NACIONAL: "transporte_terrestre",
    ImportStatus.CONCLUIDO: "entrega",
}


def generate_code(importacao: Importacao) -> str:
    year = (importacao.created_at or utcnow()).year
    return f"IMP-{year}-{importacao.id:04d}"


def product_total(quantidade: int, preco_unitario: Decimal) -> Decimal:
    return (Decimal(quantidade) * Decimal(preco_unitario)).quantize(Decimal("0.01"))


def _ensure_editable(importacao: Importacao) -> None:
    if importacao.status != ImportStatus.PLANEJAMENTO:
        raise BusinessRuleError(Messages.IMPORT_ONLY_PLANNING_EDIT)


def _ensure_supplier(db: Session, fornecedor_id: Optional[int], user_id: int) -> None:
    if fornecedor_id is not None and fornecedor_repository.get_by_id_for_user(db, fornecedor_id, user_id) is None:
        raise RecordNotFoundError("Fornecedor", fornecedor_id)


def _add_history(
    db: Session,
    importacao: Importacao,
    status: str,
    status_anterior: Optional[str],
    user_id: Optional[int],
    notas: Optional[str] = None,
    automatico: bool = False,
) -> HistoricoImportacao:
    entry = HistoricoImportacao(
        importacao_id=importacao.id,
        status=status,
        status_anterior=status_anterior,
        alterado_por=user_id,
        notas=notas,
        automatico=automatico,
    )
    db.add(entry)
    return entry


def create_import(db: Session, user_id: int, data: ImportacaoCreate) -> Importacao:
    """
    Cria a importação em planejamento, com produtos, código e histórico.

    Se vinculada a uma solicitação de crédito, valida o disponível, reserva
    o crédito e gera o cronograma de pagamentos.
    """
    produtos = [
        ProdutoImportacao(
            **p.model_dump(),
            valor_total=product_total(p.quantidade, p.preco_unitario),
        )
        for p in data.produtos
    ]
    valor_total = data.valor_total
    if valor_total is None:
        valor_total = sum((p.valor_total for p in produtos), Decimal("0"))
    if valor_total <= 0:
        raise ValidationError("Informe o valor total ou ao menos um produto")

    _ensure_supplier(db, data.fornecedor_id, user_id)
    if data.solicitacao_credito_id is not None:
        credit_service.ensure_credit_for_import(db, user_id, data.solicitacao_credito_id, valor_total)

    fields = data.model_dump(exclude={"produtos", "valor_total"})
    importacao = Importacao(
        **fields,
        user_id=user_id,
        valor_total=valor_total,
        status=ImportStatus.PLANEJAMENTO,
        etapa_atual=import_pipeline.INITIAL_STAGE,
    )
    import_pipeline.update_stage(importacao, import_pipeline.INITIAL_STAGE, StageStatus.IN_PROGRESS)
    importacao.produtos = produtos
    db.add(importacao)
    db.flush()

    importacao.codigo = generate_code(importacao)
    _add_history(db, importacao, ImportStatus.PLANEJAMENTO, None, user_id, "Importação criada", automatico=True)
    db.commit()
    db.refresh(importacao)

    if importacao.solicitacao_credito_id is not None:
        credit_service.reserve_credit(db, importacao)
        payment_schedule.generate_schedule(db, importacao)
        db.refresh(importacao)

    record_import_event("created")
    log_action(logger, "import_created", user_id=user_id, resource_type="import",
               resource_id=importacao.id, valor_total=str(importacao.valor_total))
    return importacao


def _apply_new_total(db: Session, importacao: Importacao, novo_total: Decimal) -> None:
    """Valida o crédito disponível para o novo total antes de aplicá-lo."""
    if importacao.solicitacao_credito_id is not None:
        credit_service.ensure_credit_for_import(
            db, importacao.user_id, importacao.solicitacao_credito_id, novo_total,
            exclude_import_id=importacao.id,
        )
    importacao.valor_total = novo_total


def _after_total_change(db: Session, importacao: Importacao) -> None:
    if importacao.solicitacao_credito_id is not None:
        credit_service.reserve_credit(db, importacao)
        payment_schedule.regenerate_schedule(db, importacao)


def update_import(db: Session, importacao: Importacao, data: ImportacaoUpdate) -> Importacao:
    _ensure_editable(importacao)
    changes = data.model_dump(exclude_unset=True)

    if "fornecedor_id" in changes:
        _ensure_supplier(db, changes["fornecedor_id"], importacao.user_id)

    novo_total = changes.pop("valor_total", None)
    total_changed = novo_total is not None and Decimal(novo_total) != importacao.valor_total
    if total_changed:
        _apply_new_total(db, importacao, Decimal(novo_total))

    for field, value in changes.items():
        setattr(importacao, field, value)
    db.commit()
    db.refresh(importacao)

    if total_changed:
        _after_total_change(db, importacao)
        db.refresh(importacao)
    return importacao


def change_status(
    db: Session,
    importacao: Importacao,
    novo_status: str,
    user_id: Optional[int],
    notas: Optional[str] = None,
    numero_container: Optional[str] = None,
    chegada_real: Optional[datetime] = None,
    automatico: bool = False,
) -> Importacao:
    """
    Muda o status operacional registrando a linha do tempo.

    - entregue_agente: entrada vence imediatamente e o crédito é confirmado
    - cancelado: libera o crédito e cancela as parcelas em aberto
    - concluido: registra a chegada real e conclui a etapa de entrega
    """
    if novo_status not in ImportStatus.ALL:
        raise ValidationError(Messages.INVALID_STATUS)
    if importacao.status in ImportStatus.FINAL:
        raise BusinessRuleError(Messages.IMPORT_FINAL_STATUS)
    if novo_status == importacao.status:
        raise BusinessRuleError(f"Importação já está em {ImportStatus.LABELS[novo_status]}")

    anterior = importacao.status
    importacao.status = novo_status
    if numero_container:
        importacao.numero_container = numero_container

    if novo_status == ImportStatus.ENTREGUE_AGENTE:
        payment_schedule.set_down_payment_due_now(db, importacao)
        credit_service.confirm_credit_usage(db, importacao)
    elif novo_status == ImportStatus.CANCELADO:
        _mark_cancelled(db, importacao, user_id)
    elif novo_status == ImportStatus.CONCLUIDO:
        importacao.chegada_real = chegada_real or importacao.chegada_real or utcnow()

    stage = STATUS_STAGE.get(novo_status)
    if stage:
        stage_status = StageStatus.COMPLETED if novo_status == ImportStatus.CONCLUIDO else StageStatus.IN_PROGRESS
        import_pipeline.update_stage(importacao, stage, stage_status)

    _add_history(db, importacao, novo_status, anterior, user_id, notas, automatico)
    db.commit()
    db.refresh(importacao)

    record_import_event("status_changed")
    log_action(logger, "import_status_changed", user_id=user_id, resource_type="import",
               resource_id=importacao.id, de=anterior, para=novo_status)
    return importacao


def _mark_cancelled(db: Session, importacao: Importacao, user_id: Optional[int]) -> None:
    importacao.cancelado_em = utcnow()
    importacao.cancelado_por = user_id
    credit_service.release_credit_usage(db, importacao)
    payment_schedule.cancel_open_payments(db, importacao)
    import_pipeline.cancel_pending_stages(importacao)


def cancel_import(db: Session, importacao: Importacao, user_id: int, motivo: Optional[str] = None) -> Importacao:
    """Cancelamento lógico; recusado para importações concluídas ou canceladas."""
    if importacao.status in ImportStatus.FINAL:
        raise BusinessRuleError(Messages.IMPORT_CANNOT_CANCEL)
    importacao = change_status(
        db, importacao, ImportStatus.CANCELADO, user_id, notas=motivo or "Importação cancelada",
    )
    record_import_event("cancelled")
    return importacao


# === Produtos ===


def _products_total(importacao: Importacao, extra: Decimal = Decimal("0"), skip_id: Optional[int] = None) -> Decimal:
    total = sum(
        (p.valor_total for p in importacao.produtos if p.id != skip_id),
        Decimal("0"),
    )
    return total + extra


def _update_total_from_products(db: Session, importacao: Importacao, novo_total: Decimal) -> bool:
    if novo_total <= 0 or novo_total == importacao.valor_total:
        return False
    _apply_new_total(db, importacao, novo_total)
    return True


def add_product(db: Session, importacao: Importacao, data: ProdutoCreate) -> ProdutoImportacao:
    _ensure_editable(importacao)
    produto = ProdutoImportacao(
        **data.model_dump(),
        importacao_id=importacao.id,
        valor_total=product_total(data.quantidade, data.preco_unitario),
    )
    changed = _update_total_from_products(db, importacao, _products_total(importacao, produto.valor_total))
    db.add(produto)
    db.commit()
    db.refresh(produto)
    if changed:
        _after_total_change(db, importacao)
    return produto


def update_product(db: Session, importacao: Importacao, produto_id: int, data: ProdutoUpdate) -> ProdutoImportacao:
    _ensure_editable(importacao)
    produto = produto_repository.get_for_import(db, importacao.id, produto_id)
    if produto is None:
        raise RecordNotFoundError("Produto", produto_id)

    changes = data.model_dump(exclude_unset=True)
    quantidade = changes.get("quantidade", produto.quantidade)
    preco = changes.get("preco_unitario", produto.preco_unitario)
    novo_valor = product_total(quantidade, preco)
    changed = _update_total_from_products(
        db, importacao, _products_total(importacao, novo_valor, skip_id=produto.id),
    )

    for field, value in changes.items():
        setattr(produto, field, value)
    produto.valor_total = novo_valor
    db.commit()
    db.refresh(produto)
    if changed:
        _after_total_change(db, importacao)
    return produto


def delete_product(db: Session, importacao: Importacao, produto_id: int) -> None:
    _ensure_editable(importacao)
    produto = produto_repository.get_for_import(db, importacao.id, produto_id)
    if produto is None:
        raise RecordNotFoundError("Produto", produto_id)

    changed = _update_total_from_products(db, importacao, _products_total(importacao, skip_id=produto.id))
    db.delete(produto)
    db.commit()
    if changed:
        _after_total_change(db, importacao)


def financial_summary(db: Session, importacao: Importacao) -> Dict[str, Any]:
    """Taxa administrativa, uso de crédito e totais pagos/pendentes."""
    pagamentos: List = list(importacao.pagamentos)
    pago = sum((p.valor for p in pagamentos if p.status in (PaymentStatus.PAID, PaymentStatus.CONFIRMED)), Decimal("0"))
    pendente = sum((p.valor for p in pagamentos if p.status in PaymentStatus.OPEN), Decimal("0"))
    uso = None
    if importacao.solicitacao_credito is not None:
        uso = credit_service.get_credit_usage(db, importacao.solicitacao_credito)
    return {
        "importacao_id": importacao.id,
        "taxa": credit_service.calculate_import_fee(db, importacao),
        "uso_credito": uso,
        "total_pago": credit_service.quantize(pago),
        "total_pendente": credit_service.quantize(pendente),
        "pagamentos": pagamentos,
    }


# === Documentos ===


def is_mandatory_document(importacao: Importacao, tipo: str) -> bool:
    return tipo in MANDATORY_IMPORT_DOCUMENTS.get(importacao.modal, [])


def add_document(
    db: Session,
    importacao: Importacao,
    user_id: int,
    tipo: str,
    nome_arquivo: str,
    caminho: str,
    tamanho_bytes: int,
    pontuacao: Optional[int] = None,
) -> DocumentoImportacao:
    """Registra um documento de embarque já validado e gravado no storage."""
    documento = DocumentoImportacao(
        importacao_id=importacao.id,
        tipo=tipo,
        nome_arquivo=nome_arquivo,
        caminho_arquivo=caminho,
        tamanho_bytes=tamanho_bytes,
        obrigatorio=is_mandatory_document(importacao, tipo),
        status=ImportDocumentStatus.UPLOADED,
        pontuacao=pontuacao,
        enviado_por=user_id,
    )
    db.add(documento)
    db.commit()
    db.refresh(documento)
    return documento


def review_document(
    db: Session, documento: DocumentoImportacao, status: str, notas: Optional[str] = None,
) -> DocumentoImportacao:
    """Admin marca o documento como validado ou rejeitado."""
    if status not in (ImportDocumentStatus.VALIDATED, ImportDocumentStatus.REJECTED):
        raise ValidationError(Messages.INVALID_STATUS)
    documento.status = status
    if notas is not None:
        documento.notas = notas
    db.commit()
    db.refresh(documento)
    return documento


def missing_mandatory_documents(importacao: Importacao) -> List[str]:
    enviados = {d.tipo for d in importacao.documentos if d.status != ImportDocumentStatus.REJECTED}
    return [t for t in MANDATORY_IMPORT_DOCUMENTS.get(importacao.modal, []) if t not in enviados]


def assign_customs_broker(
    db: Session, importacao: Importacao, despachante_id: Optional[int],
) -> Importacao:
    """Atribui (ou remove, com None) o despachante da importação."""
    if despachante_id is not None:
        despachante = usuario_repository.get_by_id(db, despachante_id)
        if despachante is None or despachante.role != UserRole.CUSTOMS_BROKER or not despachante.is_active:
            raise BusinessRuleError(Messages.CUSTOMS_BROKER_INVALID)
    importacao.despachante_id = despachante_id
    db.commit()
    db.refresh(importacao)
    return importacao
