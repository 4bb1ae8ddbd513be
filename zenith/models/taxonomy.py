from sqlalchemy import Column, String, Text

from zenith.db.base_class import Base


class Category(Base):
    __tablename__ = "categories"

    name = Column(String(50), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)


class Tag(Base):
    __tablename__ = "tags"

    name = Column(String(50), unique=True, index=True, nullable=False)
