"""
Repositório base com operações CRUD genéricas.
"""
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """
    Repositório genérico sobre um modelo SQLAlchemy.

    Uso:
        class FornecedorRepository(BaseRepository[Fornecedor]):
            def __init__(self):
                super().__init__(Fornecedor)
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get_by_id(self, db: Session, id: int) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()  # type: ignore[attr-defined]

    def get_by_id_for_user(self, db: Session, id: int, user_id: int) -> Optional[ModelType]:
        """Busca por ID restrita ao dono do registro."""
        return db.query(self.model).filter(
            self.model.id == id,  # type: ignore[attr-defined]
            self.model.user_id == user_id  # type: ignore[attr-defined]
        ).first()

    def query(self, db: Session, **filters: Any) -> Query:
        """
        Query ordenada por created_at desc com filtros de igualdade.

        Filtros com valor None são ignorados, o que permite repassar
        parâmetros opcionais de rota diretamente.
        """
        query = db.query(self.model)
        for column_name, value in filters.items():
            if value is None or not hasattr(self.model, column_name):
                continue
            query = query.filter(getattr(self.model, column_name) == value)
        if hasattr(self.model, "created_at"):
            query = query.order_by(
                self.model.created_at.desc(),  # type: ignore[attr-defined]
                self.model.id.desc(),  # type: ignore[attr-defined]
            )
        return query

    def count_for_user(self, db: Session, user_id: int) -> int:
        return db.query(self.model).filter(
            self.model.user_id == user_id  # type: ignore[attr-defined]
        ).count()

    def count_by_status(self, db: Session, *criteria: Any) -> Dict[str, int]:
        """Contagem agrupada por `status` com critérios opcionais."""
        column = self.model.status  # type: ignore[attr-defined]
        rows = db.query(column, func.count()).filter(*criteria).group_by(column).all()
        return {status: count for status, count in rows}

    def create(self, db: Session, entity: ModelType) -> ModelType:
        db.add(entity)
        db.commit()
        db.refresh(entity)
        return entity

    def update(self, db: Session, entity: ModelType, data: Optional[Dict[str, Any]] = None) -> ModelType:
        """Aplica `data` (campos já validados) e persiste."""
        for field, value in (data or {}).items():
            setattr(entity, field, value)
        db.commit()
        db.refresh(entity)
        return entity

    def delete(self, db: Session, entity: ModelType) -> None:
        db.delete(entity)
        db.commit()

    def bulk_create(self, db: Session, entities: List[ModelType]) -> List[ModelType]:
        """Cria várias entidades em uma transação."""
        db.add_all(entities)
        db.commit()
        for entity in entities:
            db.refresh(entity)
        return entities
