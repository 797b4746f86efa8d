# ============================================================
# Module : metadisplay/services/config_transfer.py
# Objet  : Export/import JSON d'une configuration complète.
# ============================================================
"""
Export et import de configurations d'affichage.

L'export produit un document JSON autonome (nom, nom machine, content models, champs,
description). L'import valide ce document avec Pydantic puis recrée la configuration via le
magasin, ce qui resynchronise aussi le registre de traductions.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel, Field, field_validator

from metadisplay.domain.display_config import FieldConfig
from metadisplay.infra.repo.display_config_store import DisplayConfigStore

log = structlog.get_logger(__name__)


class FieldExport(BaseModel):
    """Champ exporté.

    Champs:
    - solr_field: str
    - weight: int
    - display_label: str | None
    - hyperlink: bool
    - extra: dict (options de rendu libres)
    """

    solr_field: str
    weight: int = 0
    display_label: str | None = None
    hyperlink: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)


class DescriptionExport(BaseModel):
    description_field: str | None = None
    description_label: str | None = None
    description_data: dict[str, Any] = Field(default_factory=dict)


class ConfigurationExport(BaseModel):
    """Document d'export d'une configuration."""

    name: str
    machine_name: str
    content_models: list[str] = Field(default_factory=list)
    fields: list[FieldExport] = Field(default_factory=list)
    description: DescriptionExport = Field(default_factory=DescriptionExport)

    @field_validator("fields")
    @classmethod
    def _unique_solr_fields(cls, fields: list[FieldExport]) -> list[FieldExport]:
        seen: set[str] = set()
        for f in fields:
            if f.solr_field in seen:
                raise ValueError(f"duplicate solr_field: {f.solr_field!r}")
            seen.add(f.solr_field)
        return fields


def export_configuration(store: DisplayConfigStore, configuration_id: int) -> dict[str, Any] | None:
    """Exporte une configuration (valeurs stockées, non traduites), ou None si inconnue."""
    summary = store.get_configuration(configuration_id, translate=False)
    if summary is None:
        return None
    fields = store.get_fields(configuration_id, translate=False)
    description = store.get_description(configuration_id, translate=False)
    doc = ConfigurationExport(
        name=summary.name,
        machine_name=summary.machine_name,
        content_models=sorted(store.get_content_models(configuration_id)),
        fields=[
            FieldExport(
                solr_field=f.solr_field,
                weight=f.weight,
                display_label=f.display_label,
                hyperlink=f.hyperlink,
                extra=f.extra,
            )
            for f in fields.values()
        ],
        description=DescriptionExport(
            description_field=description.description_field,
            description_label=description.description_label,
            description_data=description.description_data,
        ),
    )
    return doc.model_dump()


def import_configuration(store: DisplayConfigStore, payload: dict[str, Any]) -> int:
    """Crée une configuration depuis un document d'export et retourne son identifiant.

    Lève pydantic.ValidationError si le document est invalide et DuplicateMachineName si le nom
    machine existe déjà. Si une étape échoue après la création, la configuration partielle est
    supprimée avant de relancer l'erreur.
    """
    doc = ConfigurationExport.model_validate(payload)
    configuration_id = store.add_configuration(doc.name, doc.machine_name)
    try:
        store.add_content_models(configuration_id, doc.content_models)
        store.add_fields(
            configuration_id,
            [
                FieldConfig(
                    solr_field=f.solr_field,
                    weight=f.weight,
                    display_label=f.display_label,
                    hyperlink=f.hyperlink,
                    extra=dict(f.extra),
                )
                for f in doc.fields
            ],
        )
        if doc.description.description_field:
            store.update_description(
                configuration_id,
                doc.description.description_field,
                doc.description.description_label,
                doc.description.description_data,
            )
    except Exception as err:
        log.warning(
            "configuration_import_failed",
            configuration_id=configuration_id,
            machine_name=doc.machine_name,
            error=str(err),
        )
        store.delete_configuration(configuration_id)
        raise
    log.info(
        "configuration_imported",
        configuration_id=configuration_id,
        machine_name=doc.machine_name,
        fields=len(doc.fields),
    )
    return configuration_id
