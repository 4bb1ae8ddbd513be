from sqlalchemy import Column, Enum, String, Text

from zenith.db.base_class import Base
from zenith.models.enums import Role


class User(Base):
    __tablename__ = "users"

    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    bio = Column(Text, nullable=True)
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.USER)
