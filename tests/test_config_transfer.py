"""Tests pour l'export/import JSON des configurations."""

from __future__ import annotations

import datetime

import pytest
from pydantic import ValidationError

from metadisplay.domain.display_config import FieldConfig
from metadisplay.domain.errors import DuplicateMachineName, UnsupportedAttributeValue
from metadisplay.infra.repo.display_config_store import DisplayConfigStore
from metadisplay.infra.translations.backends import InMemoryTranslationBackend
from metadisplay.infra.translations.base import ActiveRegistry
from metadisplay.services.config_transfer import export_configuration, import_configuration


def _seed(store) -> int:
    cid = store.add_configuration("Books", "books")
    store.add_content_models(cid, ["islandora:pageCModel", "islandora:bookCModel"])
    store.add_fields(
        cid,
        [
            FieldConfig(solr_field="title_s", weight=0, display_label="Title", hyperlink=True),
            FieldConfig(solr_field="dc_date", weight=1, extra={"date_format": "Y"}),
        ],
    )
    store.update_description(
        cid, "dc.description", "Description", {"truncation": {"max_length": 50}}
    )
    return cid


def test_export_configuration(store) -> None:
    cid = _seed(store)
    doc = export_configuration(store, cid)
    assert doc["name"] == "Books"
    assert doc["machine_name"] == "books"
    assert doc["content_models"] == ["islandora:bookCModel", "islandora:pageCModel"]
    assert [f["solr_field"] for f in doc["fields"]] == ["title_s", "dc_date"]
    assert doc["fields"][1]["extra"] == {"date_format": "Y"}
    assert doc["description"]["description_data"] == {"truncation": {"max_length": 50}}


def test_export_unknown_configuration(store) -> None:
    assert export_configuration(store, 404) is None


def test_import_recreates_configuration(store) -> None:
    """Teste qu'un export réimporté sous un autre nom machine est identique."""
    cid = _seed(store)
    doc = export_configuration(store, cid)
    doc["machine_name"] = "books_copy"

    new_id = import_configuration(store, doc)

    assert new_id != cid
    assert store.get_fields(new_id) == store.get_fields(cid)
    assert store.get_content_models(new_id) == store.get_content_models(cid)
    assert store.get_description(new_id) == store.get_description(cid)


def test_import_duplicate_machine_name(store) -> None:
    cid = _seed(store)
    with pytest.raises(DuplicateMachineName):
        import_configuration(store, export_configuration(store, cid))


def test_import_rejects_invalid_document(store) -> None:
    with pytest.raises(ValidationError):
        import_configuration(store, {"name": "No machine name"})
    assert store.list_configurations() == []


def test_import_rejects_repeated_solr_field(store) -> None:
    payload = {
        "name": "B",
        "machine_name": "b",
        "fields": [{"solr_field": "t"}, {"solr_field": "t"}],
    }
    with pytest.raises(ValidationError, match="duplicate solr_field"):
        import_configuration(store, payload)
    assert store.get_configuration_id_by_machine_name("b") is None


def test_import_failure_after_creation_removes_partial_configuration(store) -> None:
    """Teste qu'un échec en cours d'import ne laisse pas de configuration partielle."""
    payload = {
        "name": "B",
        "machine_name": "b",
        "content_models": ["islandora:bookCModel"],
        "fields": [{"solr_field": "dc_date", "extra": {"since": datetime.date(2020, 1, 1)}}],
    }
    with pytest.raises(UnsupportedAttributeValue):
        import_configuration(store, payload)
    assert store.get_configuration_id_by_machine_name("b") is None
    assert store.find_configurations_by_content_models({"islandora:bookCModel"}) == set()


class _UnreadableBackend(InMemoryTranslationBackend):
    def get(self, key: str) -> str | None:
        raise ConnectionError("backend down")


def test_export_reads_untranslated_values_only(engine) -> None:
    """Teste que l'export ne consulte pas le registre (aucune lecture de traduction)."""
    store = DisplayConfigStore(engine, ActiveRegistry(_UnreadableBackend()))
    store.add_configuration("Other", "other")
    cid = _seed(store)
    doc = export_configuration(store, cid)
    assert (doc["name"], doc["machine_name"]) == ("Books", "books")
