from __future__ import annotations
from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# =============================
# App settings (operator identity, API key, server address)
# =============================
class AppSetting(Base):
    __tablename__ = "app_settings"
    key = Column(String(200), primary_key=True)
    value = Column(String(5000), nullable=True)
