# Services do Spark Comex
#
# Os módulos de regra de negócio (credit_service, import_service,
# payment_schedule, ...) são importados diretamente. As instâncias
# compartilhadas abaixo são carregadas sob demanda.


def __getattr__(name):
    """Lazy loading das instâncias compartilhadas."""
    if name == "audit_service":
        from .audit_service import audit_service
        return audit_service
    elif name == "notification_service":
        from .notification import notification_service
        return notification_service
    elif name == "document_validator":
        from .document_validation import document_validator
        return document_validator
    elif name == "smart_document_validator":
        from .document_validation import smart_document_validator
        return smart_document_validator
    raise AttributeError(f"module 'services' has no attribute '{name}'")


__all__ = [
    "audit_service",
    "notification_service",
    "document_validator",
    "smart_document_validator",
]
