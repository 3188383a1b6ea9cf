"""
Module: currency_kernel.db.base
Responsibility: Declarative base class for the kernel's SQLAlchemy ORM models.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the persistence layer.  ALL model files import from here.  This
    module MUST NOT import from models/, domain/, or outer layers.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for currency kernel ORM models."""
