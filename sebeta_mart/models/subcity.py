from sqlalchemy import Column, Integer, String
from sebeta_mart.database import Base


class Subcity(Base):
    __tablename__ = "subcities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
