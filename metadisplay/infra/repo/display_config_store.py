# ============================================================
# Module : metadisplay/infra/repo/display_config_store.py
# Objet  : Accès SQL (CRUD) des configurations d'affichage,
#          champs Solr et liens content model.
# Notes  : une opération logique = une transaction (session_scope).
# ============================================================
"""
Magasin des configurations d'affichage de métadonnées.

Ce module expose le CRUD sur les tables `configurations`, `fields` et `content_model_links`, et
tient le registre de traductions synchronisé avec les chaînes visibles (nom de configuration,
libellés de champs, libellé de description).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog
from sqlalchemy import delete, distinct, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from metadisplay.core.metrics import observe_operation
from metadisplay.domain.display_config import (
    ConfigurationSummary,
    DescriptionConfig,
    FieldConfig,
)
from metadisplay.domain.errors import DuplicateField, DuplicateMachineName
from metadisplay.infra.repo.blob import decode_blob, encode_blob, field_from_row, field_to_blob
from metadisplay.infra.repo.db import session_scope
from metadisplay.infra.repo.models import ConfigurationORM, ContentModelLinkORM, FieldORM
from metadisplay.infra.translations.base import (
    NullRegistry,
    TranslationRegistry,
    build_translation_key,
)


def _as_field(value: FieldConfig | dict[str, Any]) -> FieldConfig:
    if isinstance(value, FieldConfig):
        return value
    return FieldConfig.from_mapping(value)


class DisplayConfigStore:
    """CRUD des configurations d'affichage avec synchronisation des traductions."""

    def __init__(self, engine: Engine, registry: TranslationRegistry | None = None) -> None:
        """Construit le magasin.

        Paramètres:
        - engine: moteur SQLAlchemy (schéma créé par Alembic ou `init_schema`).
        - registry: registre de traductions; `NullRegistry` si absent.
        """
        self._engine = engine
        self._registry = registry or NullRegistry()
        self._log = structlog.get_logger(__name__).bind(component="display_config_store")

    @property
    def registry(self) -> TranslationRegistry:
        return self._registry

    # -- traductions -------------------------------------------------------

    def _translate(self, key: str, fallback: str) -> str:
        if self._registry.is_available():
            return self._registry.translate(key, fallback)
        return fallback

    def _sync_update(self, key: str, value: str) -> None:
        if self._registry.is_available():
            self._registry.update(key, value)

    def _sync_remove(self, key: str) -> None:
        if self._registry.is_available():
            self._registry.remove(key)

    # -- configurations ----------------------------------------------------

    def list_configurations(self) -> list[ConfigurationSummary]:
        """Retourne toutes les configurations (nom traduit si possible)."""
        with observe_operation("list_configurations"), session_scope(self._engine) as session:
            rows = session.execute(
                select(
                    ConfigurationORM.configuration_id,
                    ConfigurationORM.configuration_name,
                    ConfigurationORM.machine_name,
                )
            ).all()
        return [
            ConfigurationSummary(
                id=cid,
                name=self._translate(build_translation_key("configuration_name", cid), name),
                machine_name=machine_name,
            )
            for cid, name, machine_name in rows
        ]

    def add_configuration(self, name: str, machine_name: str) -> int:
        """Crée une configuration et retourne son identifiant.

        Lève DuplicateMachineName si `machine_name` est déjà pris (aucune ligne insérée).
        """
        with observe_operation("add_configuration"), session_scope(self._engine) as session:
            taken = session.execute(
                select(ConfigurationORM.configuration_id).where(
                    ConfigurationORM.machine_name == machine_name
                )
            ).first()
            if taken is not None:
                raise DuplicateMachineName(machine_name)
            row = ConfigurationORM(configuration_name=name, machine_name=machine_name)
            session.add(row)
            try:
                session.flush()
            except IntegrityError as err:
                # Course avec un autre appelant: la contrainte d'unicité tranche.
                raise DuplicateMachineName(machine_name) from err
            configuration_id = int(row.configuration_id)
            self._sync_update(build_translation_key("configuration_name", configuration_id), name)
        self._log.info(
            "configuration_added", configuration_id=configuration_id, machine_name=machine_name
        )
        return configuration_id

    def get_configuration(
        self, configuration_id: int, translate: bool = True
    ) -> ConfigurationSummary | None:
        """Retourne une configuration (nom traduit si demandé), ou None si elle n'existe pas."""
        with observe_operation("get_configuration"), session_scope(self._engine) as session:
            row = session.execute(
                select(
                    ConfigurationORM.configuration_name,
                    ConfigurationORM.machine_name,
                ).where(ConfigurationORM.configuration_id == configuration_id)
            ).first()
        if row is None:
            return None
        name, machine_name = row
        if translate:
            name = self._translate(
                build_translation_key("configuration_name", configuration_id), name
            )
        return ConfigurationSummary(id=configuration_id, name=name, machine_name=machine_name)

    def get_configuration_name(self, configuration_id: int, translate: bool = True) -> str | None:
        """Retourne le nom (traduit si demandé), ou None si la configuration n'existe pas."""
        with observe_operation("get_configuration_name"), session_scope(self._engine) as session:
            name = session.execute(
                select(ConfigurationORM.configuration_name).where(
                    ConfigurationORM.configuration_id == configuration_id
                )
            ).scalar_one_or_none()
        if name is None:
            return None
        if not translate:
            return name
        return self._translate(build_translation_key("configuration_name", configuration_id), name)

    def get_configuration_id_by_machine_name(self, machine_name: str) -> int | None:
        with observe_operation("get_configuration_id_by_machine_name"), session_scope(
            self._engine
        ) as session:
            return session.execute(
                select(ConfigurationORM.configuration_id).where(
                    ConfigurationORM.machine_name == machine_name
                )
            ).scalar_one_or_none()

    def configuration_exists(self, configuration_id: int) -> bool:
        with observe_operation("configuration_exists"), session_scope(self._engine) as session:
            found = session.execute(
                select(ConfigurationORM.configuration_id).where(
                    ConfigurationORM.configuration_id == configuration_id
                )
            ).first()
        return found is not None

    def delete_configuration(self, configuration_id: int) -> None:
        """Supprime une configuration et tout ce qui en dépend, dans une seule transaction.

        Ordre fixe:
        1) traductions des libellés de champs (les noms de champs sont lus avant suppression),
        2) lignes `fields`,
        3) lignes `content_model_links`,
        4) traductions du nom et du libellé de description,
        5) ligne `configurations`.

        Rejouable: les lignes déjà absentes sont ignorées.
        """
        with observe_operation("delete_configuration"), session_scope(self._engine) as session:
            field_names = (
                session.execute(
                    select(FieldORM.solr_field).where(FieldORM.configuration_id == configuration_id)
                )
                .scalars()
                .all()
            )
            for field_name in field_names:
                self._sync_remove(
                    build_translation_key("field_display_label", configuration_id, field_name)
                )
            session.execute(delete(FieldORM).where(FieldORM.configuration_id == configuration_id))
            session.execute(
                delete(ContentModelLinkORM).where(
                    ContentModelLinkORM.configuration_id == configuration_id
                )
            )
            self._sync_remove(build_translation_key("configuration_name", configuration_id))
            self._sync_remove(build_translation_key("description_label", configuration_id))
            session.execute(
                delete(ConfigurationORM).where(
                    ConfigurationORM.configuration_id == configuration_id
                )
            )
        self._log.info(
            "configuration_deleted", configuration_id=configuration_id, fields=len(field_names)
        )

    # -- content models ----------------------------------------------------

    def find_configurations_by_content_models(self, cmodels: Iterable[str]) -> set[int]:
        """Retourne les configurations liées à au moins un des content models donnés.

        Un ensemble vide ne correspond à aucune configuration.
        """
        wanted = set(cmodels)
        if not wanted:
            return set()
        with observe_operation("find_configurations_by_content_models"), session_scope(
            self._engine
        ) as session:
            ids = (
                session.execute(
                    select(distinct(ContentModelLinkORM.configuration_id)).where(
                        ContentModelLinkORM.cmodel.in_(wanted)
                    )
                )
                .scalars()
                .all()
            )
        return set(ids)

    def get_content_models(self, configuration_id: int) -> set[str]:
        with observe_operation("get_content_models"), session_scope(self._engine) as session:
            cmodels = (
                session.execute(
                    select(ContentModelLinkORM.cmodel).where(
                        ContentModelLinkORM.configuration_id == configuration_id
                    )
                )
                .scalars()
                .all()
            )
        return set(cmodels)

    def add_content_models(self, configuration_id: int, cmodels: Iterable[str]) -> None:
        """Insère un lien par content model (pas de dédoublonnage: à la charge de l'appelant)."""
        cmodels = list(cmodels)
        if not cmodels:
            return
        with observe_operation("add_content_models"), session_scope(self._engine) as session:
            session.add_all(
                ContentModelLinkORM(configuration_id=configuration_id, cmodel=cmodel)
                for cmodel in cmodels
            )
        self._log.debug(
            "content_models_added", configuration_id=configuration_id, count=len(cmodels)
        )

    def delete_content_models(self, configuration_id: int, cmodels: Iterable[str]) -> None:
        cmodels = set(cmodels)
        if not cmodels:
            return
        with observe_operation("delete_content_models"), session_scope(self._engine) as session:
            session.execute(
                delete(ContentModelLinkORM).where(
                    ContentModelLinkORM.configuration_id == configuration_id,
                    ContentModelLinkORM.cmodel.in_(cmodels),
                )
            )
        self._log.debug(
            "content_models_deleted", configuration_id=configuration_id, count=len(cmodels)
        )

    # -- fields ------------------------------------------------------------

    def get_fields(self, configuration_id: int, translate: bool = True) -> dict[str, FieldConfig]:
        """Retourne les champs d'une configuration, indexés par champ Solr, poids croissant.

        Défauts appliqués: libellé = nom du champ, hyperlink = False. Lève MalformedBlob si un
        blob stocké est illisible.
        """
        with observe_operation("get_fields"), session_scope(self._engine) as session:
            rows = session.execute(
                select(FieldORM.solr_field, FieldORM.weight, FieldORM.data)
                .where(FieldORM.configuration_id == configuration_id)
                .order_by(FieldORM.weight.asc(), FieldORM.solr_field.asc())
            ).all()
        fields: dict[str, FieldConfig] = {}
        for solr_field, weight, data in rows:
            field = field_from_row(solr_field, weight, data)
            if translate:
                field.display_label = self._translate(
                    build_translation_key("field_display_label", configuration_id, solr_field),
                    field.label,
                )
            fields[solr_field] = field
        return fields

    def add_fields(
        self, configuration_id: int, fields: Iterable[FieldConfig | dict[str, Any]]
    ) -> None:
        """Insère une ligne par champ puis enregistre les libellés dans le registre.

        Lève DuplicateField (aucune ligne insérée) si un champ est répété dans le lot ou existe
        déjà pour cette configuration.
        """
        batch = [_as_field(f) for f in fields]
        if not batch:
            return
        names = [f.solr_field for f in batch]
        with observe_operation("add_fields"), session_scope(self._engine) as session:
            repeated = sorted({n for n in names if names.count(n) > 1})
            if repeated:
                raise DuplicateField(configuration_id, repeated)
            existing = (
                session.execute(
                    select(FieldORM.solr_field).where(
                        FieldORM.configuration_id == configuration_id,
                        FieldORM.solr_field.in_(names),
                    )
                )
                .scalars()
                .all()
            )
            if existing:
                raise DuplicateField(configuration_id, sorted(existing))
            session.add_all(
                FieldORM(
                    configuration_id=configuration_id,
                    solr_field=f.solr_field,
                    weight=int(f.weight),
                    data=field_to_blob(f),
                )
                for f in batch
            )
            try:
                session.flush()
            except IntegrityError as err:
                raise DuplicateField(configuration_id, sorted(set(names))) from err
            for f in batch:
                self._sync_update(
                    build_translation_key("field_display_label", configuration_id, f.solr_field),
                    f.label,
                )
        self._log.info("fields_added", configuration_id=configuration_id, count=len(batch))

    def update_fields(
        self, configuration_id: int, fields: Iterable[FieldConfig | dict[str, Any]]
    ) -> None:
        """Écrase poids et blob de chaque champ (clé: configuration + champ Solr).

        Les champs absents en base sont ignorés (journalisés en warning).
        """
        batch = [_as_field(f) for f in fields]
        if not batch:
            return
        with observe_operation("update_fields"), session_scope(self._engine) as session:
            updated: list[FieldConfig] = []
            for f in batch:
                result = session.execute(
                    update(FieldORM)
                    .where(
                        FieldORM.configuration_id == configuration_id,
                        FieldORM.solr_field == f.solr_field,
                    )
                    .values(weight=int(f.weight), data=field_to_blob(f))
                )
                if result.rowcount == 0:
                    self._log.warning(
                        "field_update_missing_row",
                        configuration_id=configuration_id,
                        solr_field=f.solr_field,
                    )
                    continue
                updated.append(f)
            for f in updated:
                self._sync_update(
                    build_translation_key("field_display_label", configuration_id, f.solr_field),
                    f.label,
                )
        self._log.info("fields_updated", configuration_id=configuration_id, count=len(updated))

    def delete_fields(self, configuration_id: int, field_names: Iterable[str]) -> None:
        names = set(field_names)
        if not names:
            return
        with observe_operation("delete_fields"), session_scope(self._engine) as session:
            session.execute(
                delete(FieldORM).where(
                    FieldORM.configuration_id == configuration_id,
                    FieldORM.solr_field.in_(names),
                )
            )
            for name in sorted(names):
                self._sync_remove(
                    build_translation_key("field_display_label", configuration_id, name)
                )
        self._log.info("fields_deleted", configuration_id=configuration_id, count=len(names))

    # -- description -------------------------------------------------------

    def get_description(self, configuration_id: int, translate: bool = True) -> DescriptionConfig:
        """Retourne la description configurée (vide si absente ou configuration inconnue)."""
        with observe_operation("get_description"), session_scope(self._engine) as session:
            row = session.execute(
                select(
                    ConfigurationORM.description_field,
                    ConfigurationORM.description_label,
                    ConfigurationORM.description_data,
                ).where(ConfigurationORM.configuration_id == configuration_id)
            ).first()
        if row is None:
            return DescriptionConfig()
        description_field, description_label, raw_data = row
        if translate and description_label:
            description_label = self._translate(
                build_translation_key("description_label", configuration_id), description_label
            )
        return DescriptionConfig(
            description_field=description_field,
            description_label=description_label,
            description_data=decode_blob(raw_data),
        )

    def update_description(
        self,
        configuration_id: int,
        description_field: str | None,
        description_label: str | None = None,
        description_data: dict[str, Any] | None = None,
    ) -> None:
        """Enregistre le champ de description.

        Un `description_field` vide efface les trois valeurs (NULL) quel que soit le reste.
        """
        if description_field:
            values = {
                "description_field": description_field,
                "description_label": description_label or None,
                "description_data": encode_blob(description_data or {}),
            }
        else:
            values = {
                "description_field": None,
                "description_label": None,
                "description_data": None,
            }
        key = build_translation_key("description_label", configuration_id)
        with observe_operation("update_description"), session_scope(self._engine) as session:
            result = session.execute(
                update(ConfigurationORM)
                .where(ConfigurationORM.configuration_id == configuration_id)
                .values(**values)
            )
            if result.rowcount == 0:
                self._log.warning("description_update_missing_row", configuration_id=configuration_id)
                return
            if values["description_label"]:
                self._sync_update(key, values["description_label"])
            else:
                self._sync_remove(key)
        self._log.info(
            "description_updated",
            configuration_id=configuration_id,
            cleared=values["description_field"] is None,
        )
