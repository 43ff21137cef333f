"""
Database Base class
"""
from sqlalchemy.orm import declarative_base
from datetime import datetime, date

Base = declarative_base()


class BaseModel(Base):
    """Base model class"""
    __abstract__ = True

    def to_dict(self):
        """Convert the model to a dictionary"""
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }

    def to_json(self):
        """Convert the model to a JSON-serialisable dictionary"""
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, (datetime, date)):
                result[column.name] = value.isoformat()
            else:
                result[column.name] = value
        return result
