"""
Sérialisation des blobs `fields.data` et `configurations.description_data`.

Les blobs sont des dicts JSON encodés en UTF-8. Seuls les attributs hors colonnes explicites y
sont écrits, et seules les valeurs relues à l'identique sont acceptées.
"""

from __future__ import annotations

import json
import math
from typing import Any

from metadisplay.domain.display_config import FIELD_COLUMNS, FieldConfig, as_bool
from metadisplay.domain.errors import MalformedBlob, UnsupportedAttributeValue

_SCALARS = (str, int, bool, type(None))


def _check_value(attribute: str, value: Any) -> None:
    """Refuse toute valeur que JSON ne restitue pas à l'identique."""
    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedAttributeValue(attribute, value)
        return
    if isinstance(value, _SCALARS):
        return
    if type(value) is list:
        for item in value:
            _check_value(attribute, item)
        return
    if type(value) is dict:
        for key, item in value.items():
            if not isinstance(key, str):
                raise UnsupportedAttributeValue(attribute, key)
            _check_value(attribute, item)
        return
    raise UnsupportedAttributeValue(attribute, value)


def encode_blob(data: dict[str, Any] | None) -> bytes | None:
    """Encode un dict en blob; `None` reste `None` (valeur "non définie").

    Lève UnsupportedAttributeValue si un attribut n'est pas représentable en JSON à l'identique.
    """
    if data is None:
        return None
    for attribute, value in data.items():
        if not isinstance(attribute, str):
            raise UnsupportedAttributeValue(repr(attribute), attribute)
        _check_value(attribute, value)
    return json.dumps(data, sort_keys=True, ensure_ascii=False).encode("utf-8")


def decode_blob(raw: bytes | str | None) -> dict[str, Any]:
    """Décode un blob en dict; absent → dict vide.

    Lève MalformedBlob si le contenu n'est pas du JSON ou pas un objet.
    """
    if raw is None or raw == b"" or raw == "":
        return {}
    if isinstance(raw, memoryview | bytearray):
        raw = bytes(raw)
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        value = json.loads(text)
    except ValueError as err:
        raise MalformedBlob(f"undecodable blob: {err}", raw=raw) from err
    if not isinstance(value, dict):
        raise MalformedBlob(f"blob is not a mapping: {type(value).__name__}")
    return value


def field_to_blob(field: FieldConfig) -> bytes:
    """Sérialise les attributs d'un champ hors colonnes explicites."""
    payload: dict[str, Any] = {
        k: v for k, v in field.extra.items() if k not in FIELD_COLUMNS
    }
    if field.display_label:
        payload["display_label"] = field.display_label
    payload["hyperlink"] = as_bool(field.hyperlink)
    return encode_blob(payload)  # type: ignore[return-value]


def field_from_row(solr_field: str, weight: int | None, raw: bytes | None) -> FieldConfig:
    """Reconstruit un FieldConfig depuis les colonnes et le blob (défauts appliqués)."""
    data = decode_blob(raw)
    display_label = data.pop("display_label", None) or solr_field
    hyperlink = as_bool(data.pop("hyperlink", False))
    for col in FIELD_COLUMNS:
        data.pop(col, None)
    return FieldConfig(
        solr_field=solr_field,
        weight=int(weight or 0),
        display_label=display_label,
        hyperlink=hyperlink,
        extra=data,
    )
