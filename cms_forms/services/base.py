# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from cms_forms.core.exceptions import NotFoundException
from cms_forms.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(Generic[ModelType]):
    """
    Base service class providing generic lookup and persistence helpers
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize service
        :param model: SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        """
        Get object by ID
        """
        return db.query(self.model).filter(self.model.id == id).first()

    def get_or_404(self, db: Session, id: Any) -> ModelType:
        """
        Get object by ID, raising NotFoundException when it does not exist
        """
        obj = self.get(db, id)
        if obj is None:
            raise NotFoundException(f"{self.model.__name__} {id} not found")
        return obj

    def create(self, db: Session, *, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create object
        """
        db_obj = self.model(**obj_in)
        return self.save(db, db_obj)

    def save(self, db: Session, db_obj: ModelType) -> ModelType:
        """
        Persist object, rolling the session back if the commit fails
        """
        db.add(db_obj)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(db_obj)
        return db_obj
