"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports `metadisplay` en ajoutant la racine du projet
au sys.path, et fournit des magasins adossés à une base SQLite en mémoire.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from metadisplay...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from metadisplay.infra.repo.db import get_engine, init_schema  # noqa: E402
from metadisplay.infra.repo.display_config_store import DisplayConfigStore  # noqa: E402
from metadisplay.infra.translations.backends import InMemoryTranslationBackend  # noqa: E402
from metadisplay.infra.translations.base import ActiveRegistry  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Neutralise les variables d'environnement lues par Settings."""
    for key in (
        "DATABASE_URL",
        "TRANSLATION_BACKEND",
        "REDIS_URL",
        "REQUIRE_TRANSLATIONS",
        "TRANSLATION_LOCALE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def engine():
    """Moteur SQLite en mémoire avec le schéma créé."""
    eng = get_engine("sqlite+pysqlite:///:memory:")
    init_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    """Magasin sans registre de traductions."""
    return DisplayConfigStore(engine)


@pytest.fixture
def translations():
    return InMemoryTranslationBackend(locale="en")


@pytest.fixture
def translated_store(engine, translations):
    """Magasin synchronisé avec un registre de traductions en mémoire."""
    return DisplayConfigStore(engine, ActiveRegistry(translations))
