"""
Backends de chaînes traduisibles.

Ce module fournit des implémentations du protocole `TranslationBackend`, avec une version en
mémoire et une version Redis.
"""

import redis


class InMemoryTranslationBackend:
    """
    Backend de traductions en mémoire (utilisé pour dev/tests).

    Stocke les chaînes par locale dans un dict local, non persistant.
    """

    def __init__(self, locale: str = "en"):
        """Initialise une base mémoire vide pour la locale donnée."""
        self.locale = locale
        self._db: dict[str, dict[str, str]] = {}

    def get(self, key: str) -> str | None:
        return self._db.get(self.locale, {}).get(key)

    def set(self, key: str, value: str) -> None:
        self._db.setdefault(self.locale, {})[key] = value

    def delete(self, key: str) -> None:
        self._db.get(self.locale, {}).pop(key, None)

    def keys(self) -> list[str]:
        """Liste les clés connues pour la locale courante."""
        return sorted(self._db.get(self.locale, {}))


class RedisTranslationBackend:
    """Backend de traductions adossé à Redis (hash: `i18n:{locale}`, champ = clé)."""

    def __init__(self, url: str, locale: str = "en"):
        """Crée un client Redis à partir de l'URL fournie."""
        self.client = redis.Redis.from_url(url, decode_responses=True)
        self.locale = locale
        self.hash_key = f"i18n:{locale}"

    def get(self, key: str) -> str | None:
        return self.client.hget(self.hash_key, key)

    def set(self, key: str, value: str) -> None:
        self.client.hset(self.hash_key, key, value)

    def delete(self, key: str) -> None:
        self.client.hdel(self.hash_key, key)

    def keys(self) -> list[str]:
        return sorted(self.client.hkeys(self.hash_key))

    def ping(self) -> bool:
        """Vérifie la connexion (lève redis.ConnectionError si le serveur est injoignable)."""
        return bool(self.client.ping())
