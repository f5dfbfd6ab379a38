"""
Requisitos de documentos aceitos pelo Spark Comex.

DOCUMENT_REQUIREMENTS define, por tipo de documento da solicitação de
crédito, as extensões aceitas, o tamanho máximo (MB) e os textos esperados
no nome do arquivo. IMPORT_DOCUMENT_TYPES lista os documentos de embarque.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class DocumentRequirement:
    """Regras de aceitação de um tipo de documento."""
    allowed_types: Tuple[str, ...]
    max_size_mb: float
    required_text: Tuple[str, ...] = field(default_factory=tuple)
    forbidden_text: Tuple[str, ...] = field(default_factory=tuple)


_IMG_PDF = ("pdf", "jpg", "jpeg", "png")

DOCUMENT_REQUIREMENTS: Dict[str, DocumentRequirement] = {
    "business_license": DocumentRequirement(_IMG_PDF, 5, ("licença", "alvará", "funcionamento")),
    "cnpj_certificate": DocumentRequirement(_IMG_PDF, 3, ("cnpj", "receita federal")),
    "financial_statements": DocumentRequirement(("pdf", "xlsx", "xls"), 10, ("balanço", "demonstrativo", "financeiro")),
    "bank_statements": DocumentRequirement(_IMG_PDF, 8, ("banco", "extrato", "saldo")),
    "articles_of_incorporation": DocumentRequirement(("pdf",), 5, ("contrato social", "sociedade")),
    "board_resolution": DocumentRequirement(_IMG_PDF, 3, ("ata", "assembleia", "deliberação")),
    "tax_registration": DocumentRequirement(_IMG_PDF, 3, ("inscrição", "municipal", "estadual")),
    "social_security_clearance": DocumentRequirement(_IMG_PDF, 3, ("inss", "certidão", "negativa")),
    "labor_clearance": DocumentRequirement(_IMG_PDF, 3, ("fgts", "certidão", "negativa")),
    "income_tax_return": DocumentRequirement(("pdf",), 5, ("imposto de renda", "declaração", "receita federal")),
    "tax_clearance": DocumentRequirement(_IMG_PDF, 3, ("certidão", "tributos", "negativa")),
    "commercial_references": DocumentRequirement(("pdf", "doc", "docx"), 2, ("referência", "comercial")),
    "import_licenses": DocumentRequirement(_IMG_PDF, 5, ("licença", "importação")),
    "product_catalogs": DocumentRequirement(_IMG_PDF, 20, ("produto", "catálogo")),
    "quality_certificates": DocumentRequirement(_IMG_PDF, 5, ("certificado", "qualidade", "iso")),
    "insurance_policies": DocumentRequirement(("pdf",), 5, ("seguro", "apólice")),
    "bank_references": DocumentRequirement(("pdf", "doc", "docx"), 2, ("banco", "referência")),
    "additional_documents": DocumentRequirement(_IMG_PDF + ("doc", "docx"), 10),
}


# Documentos de embarque anexados a uma importação
IMPORT_DOCUMENT_TYPES: Dict[str, str] = {
    "commercial_invoice": "Fatura Comercial",
    "packing_list": "Lista de Embalagem",
    "bill_of_lading": "Conhecimento de Embarque",
    "airway_bill": "Conhecimento Aéreo",
    "certificate_origin": "Certificado de Origem",
    "insurance_policy": "Apólice de Seguro",
    "inspection_certificate": "Certificado de Inspeção",
    "import_license": "Licença de Importação",
}

# Documentos de embarque exigidos por modal de transporte
MANDATORY_IMPORT_DOCUMENTS: Dict[str, List[str]] = {
    "maritimo": ["commercial_invoice", "packing_list", "bill_of_lading"],
    "aereo": ["commercial_invoice", "packing_list", "airway_bill"],
}

# Documentos de embarque usam as mesmas regras dos documentos adicionais
IMPORT_DOCUMENT_REQUIREMENT = DocumentRequirement(_IMG_PDF + ("doc", "docx", "xls", "xlsx"), 10)


def get_requirement(document_type: str) -> DocumentRequirement:
    """Retorna as regras do tipo informado (documentos de embarque incluídos)."""
    if document_type in DOCUMENT_REQUIREMENTS:
        return DOCUMENT_REQUIREMENTS[document_type]
    if document_type in IMPORT_DOCUMENT_TYPES:
        return IMPORT_DOCUMENT_REQUIREMENT
    raise KeyError(document_type)
