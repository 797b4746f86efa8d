"""
Modèles de domaine des configurations d'affichage de métadonnées (POPO).

Ce module définit les objets manipulés par le magasin de configurations: résumé de configuration,
règle d'affichage d'un champ Solr, description et options de troncature.
"""

# ============================================================
# Module : metadisplay/domain/display_config.py
# Objet  : Objets domaine (configuration, champ, description).
# ============================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Colonnes explicites de la table `fields`; tout le reste part dans le blob `data`.
FIELD_COLUMNS = frozenset({"configuration_id", "solr_field", "weight"})

# Attributs nommés de FieldConfig stockés dans le blob.
FIELD_NAMED_ATTRIBUTES = ("display_label", "hyperlink")

# Valeurs de formulaire interprétées comme "faux".
_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def as_bool(value: Any) -> bool:
    """Convertit une valeur de formulaire en booléen (`"0"`, `"false"`, `""` valent False)."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


@dataclass
class ConfigurationSummary:
    """Ligne de la liste des configurations (nom éventuellement traduit)."""

    id: int
    name: str
    machine_name: str


@dataclass
class TruncationOptions:
    """
    Options de troncature d'une valeur affichée.

    Attributs
    - max_length: longueur maximale (0 = pas de troncature).
    - word_safe: coupe sur une frontière de mot.
    - ellipsis: ajoute "..." après la coupe.
    - min_wordsafe_length: longueur minimale conservée en mode word_safe.
    """

    max_length: int = 0
    word_safe: bool = False
    ellipsis: bool = False
    min_wordsafe_length: int = 1

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> TruncationOptions:
        """Construit les options depuis un dict partiel (valeurs manquantes par défaut)."""
        data = data or {}
        return cls(
            max_length=int(data.get("max_length") or 0),
            word_safe=as_bool(data.get("word_safe", False)),
            ellipsis=as_bool(data.get("ellipsis", False)),
            min_wordsafe_length=int(data.get("min_wordsafe_length") or 1),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "max_length": self.max_length,
            "word_safe": self.word_safe,
            "ellipsis": self.ellipsis,
            "min_wordsafe_length": self.min_wordsafe_length,
        }


@dataclass
class FieldConfig:
    """
    Règle d'affichage d'un champ Solr dans une configuration.

    `solr_field` et `weight` sont des colonnes explicites; `display_label`, `hyperlink` et `extra`
    sont sérialisés dans le blob. `display_label` vaut `None` quand il n'a pas été saisi: la
    lecture applique alors le nom du champ.

    Valeurs acceptées dans `extra` (relues à l'identique): str, int, float fini, bool, None,
    listes et dicts à clés str de ces valeurs. Les tuples, ensembles, dates ou clés non str sont
    refusés à l'écriture (UnsupportedAttributeValue).
    """

    solr_field: str
    weight: int = 0
    display_label: str | None = None
    hyperlink: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        """Libellé effectif (le nom du champ si aucun libellé n'est défini)."""
        return self.display_label or self.solr_field

    @property
    def truncation(self) -> TruncationOptions:
        return TruncationOptions.from_mapping(self.extra.get("truncation"))

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> FieldConfig:
        """Construit un champ depuis un dict plat (clés inconnues rangées dans `extra`).

        Lève KeyError si `solr_field` est absent.
        """
        extra = {
            k: v
            for k, v in data.items()
            if k not in FIELD_COLUMNS and k not in FIELD_NAMED_ATTRIBUTES
        }
        return cls(
            solr_field=data["solr_field"],
            weight=int(data.get("weight") or 0),
            display_label=data.get("display_label") or None,
            hyperlink=as_bool(data.get("hyperlink", False)),
            extra=extra,
        )

    def to_mapping(self) -> dict[str, Any]:
        """Représentation plate (inverse de `from_mapping`)."""
        return {
            **self.extra,
            "solr_field": self.solr_field,
            "weight": self.weight,
            "display_label": self.label,
            "hyperlink": self.hyperlink,
        }


@dataclass
class DescriptionConfig:
    """
    Champ de description d'une configuration.

    Les trois attributs valent `None`/`{}` quand aucune description n'est configurée.
    """

    description_field: str | None = None
    description_label: str | None = None
    description_data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_set(self) -> bool:
        return bool(self.description_field)

    @property
    def truncation(self) -> TruncationOptions:
        return TruncationOptions.from_mapping(self.description_data.get("truncation"))
