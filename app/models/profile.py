from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.db import Base


DEFAULT_ROLE = "teacher"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    email = Column(String, nullable=True)
    name = Column(String, nullable=True)
    department = Column(String, nullable=True)
    role = Column(String, nullable=False, default=DEFAULT_ROLE)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="profile")


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    head_of_department = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
