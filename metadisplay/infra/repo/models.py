"""SQLAlchemy models for persistence layer (configurations, fields, content model links)."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    Index,
    Integer,
    LargeBinary,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class ConfigurationORM(Base):
    """Modèle ORM d'une configuration d'affichage."""

    __tablename__ = "configurations"

    configuration_id = Column(Integer, primary_key=True, autoincrement=True)
    configuration_name = Column(String(255), nullable=False)
    machine_name = Column(String(255), nullable=False)
    description_field = Column(String(255), nullable=True)
    description_label = Column(String(255), nullable=True)
    description_data = Column(LargeBinary, nullable=True)

    __table_args__ = (UniqueConstraint("machine_name", name="uq_configurations_machine_name"),)


class FieldORM(Base):
    """Modèle ORM d'un champ Solr; `data` contient tout sauf les colonnes explicites."""

    __tablename__ = "fields"

    configuration_id = Column(Integer, primary_key=True, autoincrement=False)
    solr_field = Column(String(255), primary_key=True)
    weight = Column(Integer, nullable=False, default=0)
    data = Column(LargeBinary, nullable=True)

    __table_args__ = (Index("idx_fields_configuration_weight", "configuration_id", "weight"),)


class ContentModelLinkORM(Base):
    """Lien configuration -> content model (doublons non contraints)."""

    __tablename__ = "content_model_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    configuration_id = Column(Integer, nullable=False)
    cmodel = Column(String(255), nullable=False)

    __table_args__ = (
        Index("idx_cmodel_links_configuration", "configuration_id"),
        Index("idx_cmodel_links_cmodel", "cmodel"),
    )
