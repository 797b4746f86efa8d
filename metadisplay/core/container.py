"""
Conteneur d'injection de dépendances.

Instancie les composants centraux (settings, moteur SQL, registre de traductions, magasin de
configurations) à partir de la configuration.
"""

from __future__ import annotations

import structlog

from metadisplay.core.settings import Settings, get_settings
from metadisplay.infra.repo.db import get_engine
from metadisplay.infra.repo.display_config_store import DisplayConfigStore
from metadisplay.infra.translations.backends import (
    InMemoryTranslationBackend,
    RedisTranslationBackend,
)
from metadisplay.infra.translations.base import (
    ActiveRegistry,
    NullRegistry,
    TranslationRegistry,
)

log = structlog.get_logger(__name__)


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.engine = get_engine(self.settings.DATABASE_URL, echo=self.settings.DATABASE_ECHO)
        self.registry = self._build_registry()
        self.store = DisplayConfigStore(self.engine, self.registry)

    def _build_registry(self) -> TranslationRegistry:
        backend = self.settings.TRANSLATION_BACKEND
        locale = self.settings.TRANSLATION_LOCALE
        required = self.settings.REQUIRE_TRANSLATIONS
        if backend == "memory":
            self.translation_backend = "memory"
            return ActiveRegistry(InMemoryTranslationBackend(locale=locale))
        if backend == "redis":
            if not self.settings.REDIS_URL:
                if required:
                    raise RuntimeError("Translations required but REDIS_URL not set")
                log.warning("translation_backend_unconfigured", backend=backend)
                self.translation_backend = "none-fallback"
                return NullRegistry()
            try:
                redis_backend = RedisTranslationBackend(self.settings.REDIS_URL, locale=locale)
                redis_backend.ping()
            except Exception as err:
                if required:
                    raise RuntimeError("Translations required but Redis unavailable") from err
                log.warning("translation_backend_unavailable", backend=backend, error=str(err))
                self.translation_backend = "none-fallback"
                return NullRegistry()
            self.translation_backend = "redis"
            return ActiveRegistry(redis_backend)
        if required:
            raise RuntimeError("Translations required but TRANSLATION_BACKEND is 'none'")
        self.translation_backend = "none"
        return NullRegistry()


_container: Container | None = None


def get_container() -> Container:
    """Retourne le conteneur partagé (créé au premier appel)."""
    global _container
    if _container is None:
        _container = Container()
    return _container
