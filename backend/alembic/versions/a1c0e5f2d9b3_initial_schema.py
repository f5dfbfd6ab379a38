"""initial_schema

Revision ID: a1c0e5f2d9b3
Revises:
Create Date: 2026-10-12

Usuários, crédito (solicitações, usos, taxas), fornecedores, importações
(produtos, documentos, histórico), cronograma de pagamentos, pedidos de
documento, notificações e auditoria.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision: str = "a1c0e5f2d9b3"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
    )


def _fk(column: str, target: str, ondelete: str, nullable: bool) -> sa.Column:
    return sa.Column(
        column, sa.Integer(), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable
    )


def upgrade() -> None:
    # --- usuarios ---
    op.create_table(
        "usuarios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("razao_social", sa.String(255), nullable=False),
        sa.Column("cnpj", sa.String(14), nullable=False),
        sa.Column("telefone", sa.String(20), nullable=True),
        sa.Column("senha_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=True),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        _fk("created_by", "usuarios.id", "SET NULL", True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_usuarios_id", "usuarios", ["id"])
    op.create_index("ix_usuarios_email", "usuarios", ["email"], unique=True)
    op.create_index("ix_usuarios_cnpj", "usuarios", ["cnpj"], unique=True)
    op.create_index("ix_usuarios_role", "usuarios", ["role"])
    op.create_index("ix_usuarios_is_active", "usuarios", ["is_active"])
    op.create_index("ix_usuarios_role_active", "usuarios", ["role", "is_active"])

    # --- solicitacoes_credito ---
    op.create_table(
        "solicitacoes_credito",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("user_id", "usuarios.id", "CASCADE", False),
        sa.Column("razao_social", sa.String(255), nullable=False),
        sa.Column("cnpj", sa.String(14), nullable=False),
        sa.Column("valor_solicitado", sa.Numeric(14, 2), nullable=False),
        sa.Column("moeda", sa.String(3), nullable=True),
        sa.Column("finalidade", sa.Text(), nullable=True),
        sa.Column("prazos_solicitados", sa.String(100), nullable=True),
        sa.Column("produtos", sa.JSON(), nullable=True),
        sa.Column("volume_mensal_estimado", sa.Numeric(14, 2), nullable=True),
        sa.Column("documentos", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(30), nullable=True),
        sa.Column("pre_analysis_status", sa.String(30), nullable=True),
        sa.Column("financial_status", sa.String(30), nullable=True),
        sa.Column("admin_status", sa.String(30), nullable=True),
        sa.Column("analise_admin", sa.JSON(), nullable=True),
        _fk("analisado_por", "usuarios.id", "SET NULL", True),
        sa.Column("analisado_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("limite_credito", sa.Numeric(14, 2), nullable=True),
        sa.Column("prazos_aprovados", sa.String(100), nullable=True),
        sa.Column("notas_financeiras", sa.Text(), nullable=True),
        _fk("analisado_financeira_por", "usuarios.id", "SET NULL", True),
        sa.Column("enviado_financeira_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("aprovado_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("limite_final", sa.Numeric(14, 2), nullable=True),
        sa.Column("prazos_finais", sa.String(100), nullable=True),
        sa.Column("percentual_entrada", sa.Numeric(5, 2), nullable=True),
        sa.Column("taxa_administrativa", sa.Numeric(5, 2), nullable=True),
        sa.Column("finalizado_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("motivo_rejeicao", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_solicitacoes_credito_id", "solicitacoes_credito", ["id"])
    op.create_index("ix_solicitacoes_credito_user_id", "solicitacoes_credito", ["user_id"])
    op.create_index("ix_solicitacoes_credito_status", "solicitacoes_credito", ["status"])
    op.create_index("ix_solicitacoes_user_status", "solicitacoes_credito", ["user_id", "status"])
    op.create_index("ix_solicitacoes_status_created", "solicitacoes_credito", ["status", "created_at"])

    # --- taxas_administrativas ---
    op.create_table(
        "taxas_administrativas",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("user_id", "usuarios.id", "CASCADE", False),
        sa.Column("percentual", sa.Numeric(5, 2), nullable=False),
        sa.Column("ativo", sa.Boolean(), nullable=True),
        _fk("criado_por", "usuarios.id", "SET NULL", True),
        _created_at(),
    )
    op.create_index("ix_taxas_administrativas_id", "taxas_administrativas", ["id"])
    op.create_index("ix_taxas_administrativas_user_id", "taxas_administrativas", ["user_id"])
    op.create_index("ix_taxas_administrativas_ativo", "taxas_administrativas", ["ativo"])

    # --- fornecedores ---
    op.create_table(
        "fornecedores",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("user_id", "usuarios.id", "CASCADE", False),
        sa.Column("nome_empresa", sa.String(255), nullable=False),
        sa.Column("contato", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("telefone", sa.String(30), nullable=True),
        sa.Column("pais", sa.String(100), nullable=False),
        sa.Column("cidade", sa.String(100), nullable=True),
        sa.Column("endereco", sa.Text(), nullable=True),
        sa.Column("produtos", sa.Text(), nullable=True),
        sa.Column("ativo", sa.Boolean(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_fornecedores_id", "fornecedores", ["id"])
    op.create_index("ix_fornecedores_user_id", "fornecedores", ["user_id"])
    op.create_index("ix_fornecedores_user_nome", "fornecedores", ["user_id", "nome_empresa"])

    # --- importacoes ---
    op.create_table(
        "importacoes",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("user_id", "usuarios.id", "CASCADE", False),
        _fk("fornecedor_id", "fornecedores.id", "SET NULL", True),
        _fk("solicitacao_credito_id", "solicitacoes_credito.id", "SET NULL", True),
        _fk("despachante_id", "usuarios.id", "SET NULL", True),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("codigo", sa.String(30), nullable=True, unique=True),
        sa.Column("tipo_carga", sa.String(3), nullable=True),
        sa.Column("origem", sa.String(255), nullable=True),
        sa.Column("destino", sa.String(255), nullable=True),
        sa.Column("modal", sa.String(20), nullable=True),
        sa.Column("valor_total", sa.Numeric(14, 2), nullable=False),
        sa.Column("moeda", sa.String(3), nullable=True),
        sa.Column("incoterm", sa.String(3), nullable=True),
        sa.Column("status", sa.String(30), nullable=True),
        sa.Column("prioridade", sa.String(10), nullable=True),
        sa.Column("numero_container", sa.String(50), nullable=True),
        sa.Column("numero_lacre", sa.String(50), nullable=True),
        sa.Column("previsao_chegada", sa.DateTime(timezone=True), nullable=True),
        sa.Column("chegada_real", sa.DateTime(timezone=True), nullable=True),
        sa.Column("etapa_atual", sa.String(30), nullable=True),
        sa.Column("etapas", sa.JSON(), nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.Column("cancelado_em", sa.DateTime(timezone=True), nullable=True),
        _fk("cancelado_por", "usuarios.id", "SET NULL", True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_importacoes_id", "importacoes", ["id"])
    op.create_index("ix_importacoes_user_id", "importacoes", ["user_id"])
    op.create_index("ix_importacoes_fornecedor_id", "importacoes", ["fornecedor_id"])
    op.create_index("ix_importacoes_solicitacao_credito_id", "importacoes", ["solicitacao_credito_id"])
    op.create_index("ix_importacoes_despachante_id", "importacoes", ["despachante_id"])
    op.create_index("ix_importacoes_status", "importacoes", ["status"])
    op.create_index("ix_importacoes_user_status", "importacoes", ["user_id", "status"])
    op.create_index("ix_importacoes_credito_status", "importacoes", ["solicitacao_credito_id", "status"])

    # --- usos_credito ---
    op.create_table(
        "usos_credito",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("solicitacao_credito_id", "solicitacoes_credito.id", "CASCADE", False),
        _fk("importacao_id", "importacoes.id", "CASCADE", False),
        sa.Column("valor", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("reservado_em", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("confirmado_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("liberado_em", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_usos_credito_id", "usos_credito", ["id"])
    op.create_index("ix_usos_credito_solicitacao_credito_id", "usos_credito", ["solicitacao_credito_id"])
    op.create_index("ix_usos_credito_importacao_id", "usos_credito", ["importacao_id"])

    # --- produtos_importacao ---
    op.create_table(
        "produtos_importacao",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("importacao_id", "importacoes.id", "CASCADE", False),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("descricao", sa.Text(), nullable=True),
        sa.Column("quantidade", sa.Integer(), nullable=False),
        sa.Column("preco_unitario", sa.Numeric(14, 2), nullable=False),
        sa.Column("valor_total", sa.Numeric(14, 2), nullable=False),
        sa.Column("ncm", sa.String(10), nullable=True),
        sa.Column("peso_kg", sa.Numeric(12, 3), nullable=True),
        sa.Column("dimensoes", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_produtos_importacao_id", "produtos_importacao", ["id"])
    op.create_index("ix_produtos_importacao_importacao_id", "produtos_importacao", ["importacao_id"])

    # --- documentos_importacao ---
    op.create_table(
        "documentos_importacao",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("importacao_id", "importacoes.id", "CASCADE", False),
        sa.Column("tipo", sa.String(50), nullable=False),
        sa.Column("nome_arquivo", sa.String(255), nullable=False),
        sa.Column("caminho_arquivo", sa.String(500), nullable=False),
        sa.Column("tamanho_bytes", sa.Integer(), nullable=True),
        sa.Column("obrigatorio", sa.Boolean(), nullable=True),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("pontuacao", sa.Integer(), nullable=True),
        sa.Column("notas", sa.Text(), nullable=True),
        _fk("enviado_por", "usuarios.id", "SET NULL", True),
        _created_at(),
    )
    op.create_index("ix_documentos_importacao_id", "documentos_importacao", ["id"])
    op.create_index("ix_documentos_importacao_importacao_id", "documentos_importacao", ["importacao_id"])

    # --- historico_importacoes ---
    op.create_table(
        "historico_importacoes",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("importacao_id", "importacoes.id", "CASCADE", False),
        sa.Column("status", sa.String(30), nullable=False),
        sa.Column("status_anterior", sa.String(30), nullable=True),
        _fk("alterado_por", "usuarios.id", "SET NULL", True),
        sa.Column("notas", sa.Text(), nullable=True),
        sa.Column("automatico", sa.Boolean(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_historico_importacoes_id", "historico_importacoes", ["id"])
    op.create_index("ix_historico_importacoes_importacao_id", "historico_importacoes", ["importacao_id"])

    # --- cronograma_pagamentos ---
    op.create_table(
        "cronograma_pagamentos",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("importacao_id", "importacoes.id", "CASCADE", False),
        sa.Column("tipo", sa.String(20), nullable=False),
        sa.Column("valor", sa.Numeric(14, 2), nullable=False),
        sa.Column("moeda", sa.String(3), nullable=True),
        sa.Column("vencimento", sa.DateTime(timezone=True), nullable=False),
        sa.Column("numero_parcela", sa.Integer(), nullable=True),
        sa.Column("total_parcelas", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("pago_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("metodo_pagamento", sa.String(30), nullable=True),
        sa.Column("comprovante", sa.String(500), nullable=True),
        _fk("confirmado_por", "usuarios.id", "SET NULL", True),
        sa.Column("confirmado_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("motivo_rejeicao", sa.Text(), nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_cronograma_pagamentos_id", "cronograma_pagamentos", ["id"])
    op.create_index("ix_cronograma_pagamentos_importacao_id", "cronograma_pagamentos", ["importacao_id"])
    op.create_index("ix_cronograma_pagamentos_status", "cronograma_pagamentos", ["status"])
    op.create_index("ix_pagamentos_status_vencimento", "cronograma_pagamentos", ["status", "vencimento"])

    # --- solicitacoes_documento ---
    op.create_table(
        "solicitacoes_documento",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("solicitacao_credito_id", "solicitacoes_credito.id", "CASCADE", True),
        _fk("solicitado_por", "usuarios.id", "CASCADE", False),
        _fk("solicitado_de", "usuarios.id", "CASCADE", False),
        sa.Column("tipo_documento", sa.String(50), nullable=False),
        sa.Column("nome_documento", sa.String(255), nullable=False),
        sa.Column("descricao", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("arquivo_url", sa.String(500), nullable=True),
        sa.Column("nome_arquivo", sa.String(255), nullable=True),
        sa.Column("enviado_em", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index("ix_solicitacoes_documento_id", "solicitacoes_documento", ["id"])
    op.create_index(
        "ix_solicitacoes_documento_solicitacao_credito_id", "solicitacoes_documento",
        ["solicitacao_credito_id"],
    )
    op.create_index("ix_solicitacoes_documento_solicitado_de", "solicitacoes_documento", ["solicitado_de"])
    op.create_index(
        "ix_solicitacoes_documento_de_status", "solicitacoes_documento", ["solicitado_de", "status"]
    )

    # --- notificacoes ---
    op.create_table(
        "notificacoes",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("user_id", "usuarios.id", "CASCADE", False),
        sa.Column("titulo", sa.String(255), nullable=False),
        sa.Column("mensagem", sa.Text(), nullable=False),
        sa.Column("tipo", sa.String(20), nullable=False, server_default="info"),
        sa.Column("prioridade", sa.String(10), nullable=False, server_default="normal"),
        sa.Column("link", sa.String(500), nullable=True),
        sa.Column("lida", sa.Boolean(), nullable=True),
        sa.Column("lida_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("referencia_tipo", sa.String(50), nullable=True),
        sa.Column("referencia_id", sa.Integer(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_notificacoes_id", "notificacoes", ["id"])
    op.create_index("ix_notificacoes_user_id", "notificacoes", ["user_id"])
    op.create_index("ix_notificacoes_lida", "notificacoes", ["lida"])
    op.create_index("ix_notificacoes_user_lida", "notificacoes", ["user_id", "lida"])
    op.create_index("ix_notificacoes_user_created", "notificacoes", ["user_id", "created_at"])

    # --- audit_logs ---
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        _created_at(),
    )
    op.create_index("ix_audit_logs_id", "audit_logs", ["id"])
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_user_created", "audit_logs", ["user_id", "created_at"])
    op.create_index("ix_audit_resource", "audit_logs", ["resource_type", "resource_id"])


def downgrade() -> None:
    for table in (
        "audit_logs",
        "notificacoes",
        "solicitacoes_documento",
        "cronograma_pagamentos",
        "historico_importacoes",
        "documentos_importacao",
        "produtos_importacao",
        "usos_credito",
        "importacoes",
        "fornecedores",
        "taxas_administrativas",
        "solicitacoes_credito",
        "usuarios",
    ):
        op.drop_table(table)
