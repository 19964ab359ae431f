from sqlalchemy import Column, String, Text, DateTime

from .base import Base, now_utc, new_id


class User(Base):
    __tablename__ = 'users'
    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(Text, nullable=False, unique=True)
    password = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True, index=True)
    # citizen | coordinator | agency
    role = Column(String(20), nullable=False, default='citizen')
    name = Column(Text, nullable=False)
    organization = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
