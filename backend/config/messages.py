"""
Mensagens padronizadas do Spark Comex.
"""


class Messages:
    """Mensagens de erro e sucesso padronizadas."""
    # Recursos não encontrados
    NOT_FOUND = "Recurso não encontrado"
    USER_NOT_FOUND = "Usuário não encontrado"
    FILE_NOT_FOUND = "Arquivo não encontrado"
    # Acesso e autenticação
    ACCESS_DENIED = "Acesso negado"
    UNAUTHORIZED = "Acesso não autorizado"
    INVALID_TOKEN = "Credenciais inválidas"
    ADMIN_REQUIRED = "Acesso negado - privilégios de administrador necessários"
    FINANCEIRA_REQUIRED = "Acesso negado - apenas financeira"
    CUSTOMS_BROKER_REQUIRED = "Acesso negado - apenas despachantes"
    CANNOT_DEACTIVATE_SELF = "Você não pode desativar sua própria conta"
    EMAIL_EXISTS = "Email já cadastrado"
    CNPJ_EXISTS = "CNPJ já cadastrado"
    INVALID_CNPJ = "CNPJ inválido"
    INVALID_CPF = "CPF inválido"
    INVALID_CREDENTIALS = "Email ou senha incorretos"
    PASSWORDS_DONT_MATCH = "As senhas não coincidem"
    WRONG_PASSWORD = "Senha atual incorreta"
    PASSWORD_CHANGED = "Senha alterada com sucesso!"
    USER_INACTIVE = "Usuário inativo"
    INVALID_ROLE = "Perfil de usuário inválido"
    # Validação de arquivos
    INVALID_FILE = "Arquivo inválido"
    INVALID_EXTENSION = "Extensão de arquivo não permitida"
    FILE_REQUIRED = "Arquivo é obrigatório"
    # Rate limiting e erros
    RATE_LIMIT_EXCEEDED = "Muitas requisições. Tente novamente em alguns minutos."
    INTERNAL_ERROR = "Erro interno do servidor"
    DB_ERROR = "Erro ao acessar o banco de dados"
    DUPLICATE_ENTRY = "Registro já existe"
    DB_UNAVAILABLE = "Serviço de banco de dados temporariamente indisponível"
    INVALID_STATUS = "Status inválido"
    INVALID_STATUS_TRANSITION = "Transição de status inválida"
    # Solicitações de crédito
    CREDIT_NOT_FOUND = "Solicitação não encontrada"
    CREDIT_ONLY_PENDING_EDIT = "Apenas solicitações pendentes podem ser editadas"
    CREDIT_ONLY_PENDING_CANCEL = "Apenas solicitações pendentes podem ser canceladas"
    CREDIT_CANCELLED = "Solicitação cancelada com sucesso!"
    CREDIT_NOT_IN_FINANCIAL_SCOPE = "Solicitação não está pré-aprovada"
    CREDIT_LIMIT_REQUIRED = "Limite de crédito é obrigatório"
    CREDIT_NOT_APPROVED = "Solicitação de crédito ainda não foi aprovada"
    CREDIT_INSUFFICIENT = "Crédito disponível insuficiente para esta importação"
    CREDIT_DOCUMENTS_CLOSED = "Não é possível enviar documentos para esta solicitação"
    # Importações
    IMPORT_NOT_FOUND = "Importação não encontrada"
    IMPORT_ONLY_PLANNING_EDIT = "Só é possível editar importações em planejamento"
    IMPORT_CANNOT_CANCEL = "Esta importação não pode ser cancelada"
    IMPORT_FINAL_STATUS = "Importação finalizada não pode mudar de status"
    IMPORT_INVALID_STAGE = "Etapa do pipeline inválida"
    IMPORT_PIPELINE_CLOSED = "Importação finalizada não pode ter o pipeline alterado"
    PRODUCT_NOT_FOUND = "Produto não encontrado"
    PRODUCT_DELETED = "Produto removido com sucesso!"
    CUSTOMS_BROKER_INVALID = "Usuário informado não é despachante"
    # Documentos
    DOCUMENTO_NOT_FOUND = "Documento não encontrado"
    DOCUMENTO_DELETED = "Documento excluído com sucesso!"
    DOCUMENTO_INVALID_TYPE = "Tipo de documento inválido"
    DOCUMENTO_REJECTED = "Documento reprovado na validação"
    DOCUMENT_REQUEST_NOT_FOUND = "Solicitação de documento não encontrada"
    DOCUMENT_REQUEST_CLOSED = "Solicitação de documento não está mais pendente"
    # Fornecedores
    SUPPLIER_NOT_FOUND = "Fornecedor não encontrado"
    SUPPLIER_DELETED = "Fornecedor excluído com sucesso!"
    SUPPLIER_IN_USE = "Fornecedor vinculado a importações não pode ser excluído"
    # Pagamentos
    PAYMENT_NOT_FOUND = "Pagamento não encontrado"
    PAYMENT_ONLY_PENDING_EDIT = "Apenas pagamentos pendentes podem ser editados"
    PAYMENT_CANNOT_PAY = "Este pagamento não pode ser quitado"
    PAYMENT_NOT_PAID = "Apenas pagamentos quitados podem ser confirmados"
    # Notificações
    NOTIFICACAO_NOT_FOUND = "Notificação não encontrada"
    TODAS_LIDAS = "Todas as notificações marcadas como lidas"
    # Bureau de crédito
    CREDIT_BUREAU_NOT_CONFIGURED = "Consulta de crédito não configurada. Defina DIRECTD_API_TOKEN."
    CREDIT_BUREAU_ERROR = "Erro ao consultar bureau de crédito. Tente novamente."
