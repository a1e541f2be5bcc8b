"""
SQLAlchemy ORM models for the ``users`` and ``blogs`` tables.
"""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt digest


class Blog(Base):
    __tablename__ = "blogs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    userid = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(Text)
    description = Column(Text)
    image = Column(String(255), nullable=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userid": self.userid,
            "title": self.title,
            "description": self.description,
            "image": self.image,
        }
