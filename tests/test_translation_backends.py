"""
Tests pour les backends de traductions (mémoire et Redis).

Le client Redis est remplacé par un faux client à base de dict pour éviter toute connexion.
"""

from __future__ import annotations

from typing import Any

import redis

from metadisplay.infra.translations.backends import (
    InMemoryTranslationBackend,
    RedisTranslationBackend,
)


class FakeRedis:
    """Sous-ensemble des commandes hash de Redis."""

    def __init__(self) -> None:
        self.hashes: dict[str, dict[str, str]] = {}

    def hget(self, name: str, key: str) -> str | None:
        return self.hashes.get(name, {}).get(key)

    def hset(self, name: str, key: str, value: str) -> int:
        self.hashes.setdefault(name, {})[key] = value
        return 1

    def hdel(self, name: str, key: str) -> int:
        return 1 if self.hashes.get(name, {}).pop(key, None) is not None else 0

    def hkeys(self, name: str) -> list[str]:
        return list(self.hashes.get(name, {}))

    def ping(self) -> bool:
        return True


def test_in_memory_backend_isolates_locales() -> None:
    en = InMemoryTranslationBackend(locale="en")
    en.set("k", "Title")
    assert en.get("k") == "Title"
    en.locale = "fr"
    assert en.get("k") is None
    en.delete("k")
    en.locale = "en"
    assert en.keys() == ["k"]


def test_redis_backend_uses_locale_hash(monkeypatch: Any) -> None:
    fake = FakeRedis()
    monkeypatch.setattr(redis.Redis, "from_url", classmethod(lambda cls, url, **kw: fake))

    backend = RedisTranslationBackend("redis://localhost:6379/0", locale="fr")
    backend.set("metadisplay:configuration_name:1", "Basique")
    assert fake.hashes == {"i18n:fr": {"metadisplay:configuration_name:1": "Basique"}}
    assert backend.get("metadisplay:configuration_name:1") == "Basique"
    assert backend.keys() == ["metadisplay:configuration_name:1"]
    backend.delete("metadisplay:configuration_name:1")
    assert backend.get("metadisplay:configuration_name:1") is None


def test_redis_backend_ping(monkeypatch: Any) -> None:
    monkeypatch.setattr(redis.Redis, "from_url", classmethod(lambda cls, url, **kw: FakeRedis()))
    assert RedisTranslationBackend("redis://localhost:6379/0").ping() is True
