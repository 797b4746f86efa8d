"""
Erreurs du magasin de configurations d'affichage.

Ce module définit la hiérarchie d'exceptions levées par le magasin de configurations et par le
registre de traductions. Les lectures ne lèvent jamais d'erreur "introuvable": elles renvoient
`None` ou un résultat vide.
"""

from __future__ import annotations


class DisplayConfigError(Exception):
    """Erreur de base pour toutes les erreurs métier de metadisplay."""


class DuplicateMachineName(DisplayConfigError):
    """Le nom machine demandé est déjà utilisé par une autre configuration."""

    def __init__(self, machine_name: str) -> None:
        """Construit l'erreur avec le nom machine en conflit."""
        super().__init__(f"machine name already in use: {machine_name!r}")
        self.machine_name = machine_name


class MalformedBlob(DisplayConfigError):
    """Une donnée sérialisée stockée en base ne peut pas être décodée."""

    def __init__(self, message: str, raw: bytes | str | None = None) -> None:
        """Construit l'erreur; `raw` conserve la valeur brute pour diagnostic."""
        super().__init__(message)
        self.raw = raw


class StorageUnavailable(DisplayConfigError):
    """Le moteur de stockage est injoignable (connexion, verrou, schéma absent)."""


class TranslationSyncFailed(DisplayConfigError):
    """Le registre de traductions a échoué pendant une synchronisation.

    Attributs
    - op: opération du registre (`translate`, `update`, `remove`).
    - key: clé de traduction concernée.
    """

    def __init__(self, op: str, key: str) -> None:
        """Construit l'erreur pour l'opération et la clé données."""
        super().__init__(f"translation registry {op} failed for key {key!r}")
        self.op = op
        self.key = key


class DuplicateField(DisplayConfigError):
    """Un champ Solr est déjà présent (ou répété) dans la configuration."""

    def __init__(self, configuration_id: int, solr_fields: list[str]) -> None:
        """Construit l'erreur avec les champs en conflit."""
        super().__init__(
            f"duplicate solr field(s) for configuration {configuration_id}: "
            + ", ".join(solr_fields)
        )
        self.configuration_id = configuration_id
        self.solr_fields = solr_fields


class UnsupportedAttributeValue(DisplayConfigError):
    """Un attribut libre ne peut pas être sérialisé à l'identique dans un blob JSON."""

    def __init__(self, attribute: str, value: object) -> None:
        """Construit l'erreur pour l'attribut et la valeur refusée."""
        super().__init__(
            f"unsupported value for attribute {attribute!r}: {type(value).__name__}"
        )
        self.attribute = attribute
        self.value = value
