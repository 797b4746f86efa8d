"""
Tests pour l'outil en ligne de commande des configurations.

Le conteneur est construit sur une base SQLite en mémoire et injecté dans `main`.
"""

from __future__ import annotations

import json

import pytest

from metadisplay.core.container import Container
from metadisplay.core.settings import Settings
from metadisplay.scripts.manage_configs import main


@pytest.fixture
def container() -> Container:
    c = Container(Settings())
    assert main(["init-db"], container=c) == 0
    return c


def test_cli_import_list_export_delete(container, tmp_path, capsys) -> None:
    payload = {
        "name": "Basic",
        "machine_name": "basic",
        "content_models": ["islandora:sp_basic_image"],
        "fields": [{"solr_field": "title_s", "display_label": "Title"}],
    }
    src = tmp_path / "basic.json"
    src.write_text(json.dumps(payload), encoding="utf-8")
    capsys.readouterr()

    assert main(["import", str(src)], container=container) == 0
    assert "imported id=1" in capsys.readouterr().out

    assert main(["list"], container=container) == 0
    assert capsys.readouterr().out.strip() == "1\tbasic\tBasic"

    assert main(["export", "basic"], container=container) == 0
    exported = json.loads(capsys.readouterr().out)
    assert exported["fields"][0]["display_label"] == "Title"
    assert exported["content_models"] == ["islandora:sp_basic_image"]

    assert main(["delete", "basic"], container=container) == 0
    assert container.store.configuration_exists(1) is False


def test_cli_unknown_machine_name(container, capsys) -> None:
    assert main(["export", "missing"], container=container) == 1
    assert "unknown configuration" in capsys.readouterr().err


def test_cli_import_errors(container, tmp_path, capsys) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(["import", str(bad)], container=container) == 1

    good = tmp_path / "good.json"
    good.write_text(json.dumps({"name": "A", "machine_name": "a"}), encoding="utf-8")
    assert main(["import", str(good)], container=container) == 0
    assert main(["import", str(good)], container=container) == 1
    assert "already in use" in capsys.readouterr().err


def test_cli_import_repeated_field_exits_cleanly(container, tmp_path, capsys) -> None:
    doc = tmp_path / "dup.json"
    doc.write_text(
        json.dumps(
            {
                "name": "B",
                "machine_name": "b",
                "fields": [{"solr_field": "t"}, {"solr_field": "t"}],
            }
        ),
        encoding="utf-8",
    )
    capsys.readouterr()
    assert main(["import", str(doc)], container=container) == 1
    assert "duplicate solr_field" in capsys.readouterr().err
    assert container.store.get_configuration_id_by_machine_name("b") is None
