# examhall/models/test.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from examhall.db.base import Base

class Test(Base):
    __tablename__ = "tests"
    __test__ = False  # not a pytest test class

    id = Column(Integer, primary_key=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    subject = Column(String(100), nullable=False)
    time_limit = Column(Integer, nullable=False)  # minutes

    created_at = Column(DateTime(timezone=True), server_default=func.now())
