from typing import Type, TypeVar, Optional, List
from sqlalchemy.orm import Session

from utils.exceptions import NotFoundError

ModelType = TypeVar("ModelType")


class BaseService:
    not_found_message = "Resource not found"

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_or_404(self, db: Session, id: int) -> ModelType:
        """Fetch a record by id or raise ``NotFoundError``."""
        db_obj = self.get(db, id)
        if db_obj is None:
            raise NotFoundError(self.not_found_message)
        return db_obj

    def get_all(self, db: Session, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return db.query(self.model).offset(skip).limit(limit).all()

    def save(self, db: Session, db_obj: ModelType) -> ModelType:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, id: int) -> bool:
        db_obj = self.get(db, id)
        if db_obj:
            db.delete(db_obj)
            db.commit()
            return True
        return False
