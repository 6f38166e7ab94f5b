from __future__ import annotations

from sqlalchemy import Column, Float, String, Text

from ..db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    name = Column(Text, nullable=False)
    zip = Column(String(10), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    timezone = Column(Text, nullable=True)
