"""Interface du registre de traductions et construction des clés.

Ce module définit le registre de traductions consommé par le magasin de configurations, avec deux
variantes injectées à la construction: `NullRegistry` (aucun sous-système de traduction) et
`ActiveRegistry` (délégation à un backend de chaînes traduisibles).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal, Protocol

import structlog

from metadisplay.core.metrics import TRANSLATION_SYNC_ERRORS
from metadisplay.domain.errors import TranslationSyncFailed

KEY_PREFIX = "metadisplay"

KeyKind = Literal["configuration_name", "field_display_label", "description_label"]
KEY_KINDS: tuple[KeyKind, ...] = (
    "configuration_name",
    "field_display_label",
    "description_label",
)


def build_translation_key(
    kind: KeyKind, configuration_id: int, field_name: str | None = None
) -> str:
    """Construit la clé de traduction d'une chaîne de configuration.

    Format: `metadisplay:{kind}:{configuration_id}` et, pour les libellés de champ,
    `metadisplay:field_display_label:{configuration_id}:{field_name}`. Mêmes entrées, même clé.
    """
    if kind not in KEY_KINDS:
        raise ValueError(f"unknown translation key kind: {kind!r}")
    if kind == "field_display_label":
        if not field_name:
            raise ValueError("field_display_label keys require a field name")
        return f"{KEY_PREFIX}:{kind}:{int(configuration_id)}:{field_name}"
    return f"{KEY_PREFIX}:{kind}:{int(configuration_id)}"


class TranslationBackend(Protocol):
    """Protocole d'un stockage de chaînes traduisibles (une locale)."""

    def get(self, key: str) -> str | None:
        """Retourne la chaîne traduite, ou None si absente."""

    def set(self, key: str, value: str) -> None:
        """Enregistre/écrase la chaîne source d'une clé."""

    def delete(self, key: str) -> None:
        """Supprime la clé (sans erreur si absente)."""


class TranslationRegistry(ABC):
    """Interface abstraite du registre de traductions."""

    @abstractmethod
    def is_available(self) -> bool:
        """Indique si un sous-système de traduction est branché."""

    @abstractmethod
    def translate(self, key: str, fallback: str) -> str:
        """Retourne la traduction de `key`, sinon `fallback`."""

    @abstractmethod
    def update(self, key: str, value: str) -> None:
        """Enregistre ou met à jour la chaîne source de `key`."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Supprime `key` du registre."""


class NullRegistry(TranslationRegistry):
    """Registre absent: lectures en pass-through, écritures ignorées."""

    def is_available(self) -> bool:
        return False

    def translate(self, key: str, fallback: str) -> str:
        return fallback

    def update(self, key: str, value: str) -> None:
        return None

    def remove(self, key: str) -> None:
        return None


class ActiveRegistry(TranslationRegistry):
    """
    Registre délégant à un backend de traductions.

    Toute erreur du backend est journalisée, comptée, puis relevée en `TranslationSyncFailed`:
    un libellé non synchronisé ne doit jamais passer inaperçu.
    """

    def __init__(self, backend: TranslationBackend) -> None:
        """Construit le registre au-dessus du backend fourni."""
        self._backend = backend
        self._log = structlog.get_logger(__name__).bind(
            component="translation_registry", backend=type(backend).__name__
        )

    def is_available(self) -> bool:
        return True

    def _fail(self, op: str, key: str, err: Exception) -> TranslationSyncFailed:
        TRANSLATION_SYNC_ERRORS.labels(op=op).inc()
        self._log.error("translation_sync_failed", op=op, key=key, error=str(err))
        return TranslationSyncFailed(op, key)

    def translate(self, key: str, fallback: str) -> str:
        try:
            value = self._backend.get(key)
        except Exception as err:
            raise self._fail("translate", key, err) from err
        return value if value else fallback

    def update(self, key: str, value: str) -> None:
        try:
            self._backend.set(key, value)
        except Exception as err:
            raise self._fail("update", key, err) from err

    def remove(self, key: str) -> None:
        try:
            self._backend.delete(key)
        except Exception as err:
            raise self._fail("remove", key, err) from err
