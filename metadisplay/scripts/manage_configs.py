"""
Outil en ligne de commande pour les configurations d'affichage.

Ce script permet de lister, exporter, importer et supprimer des configurations à partir de la base
désignée par `DATABASE_URL`.

Usage:
    metadisplay-configs init-db
    metadisplay-configs list
    metadisplay-configs export basic > basic.json
    metadisplay-configs import basic.json
    metadisplay-configs delete basic
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from metadisplay.core.container import Container, get_container
from metadisplay.core.logging import setup_logging
from metadisplay.domain.errors import DisplayConfigError
from metadisplay.infra.repo.db import init_schema
from metadisplay.services.config_transfer import export_configuration, import_configuration


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="metadisplay-configs")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="Create missing tables")
    sub.add_parser("list", help="List configurations")
    p_export = sub.add_parser("export", help="Export a configuration as JSON")
    p_export.add_argument("machine_name")
    p_import = sub.add_parser("import", help="Import a configuration from a JSON file")
    p_import.add_argument("path", help="JSON file, or '-' for stdin")
    p_delete = sub.add_parser("delete", help="Delete a configuration and its fields/links")
    p_delete.add_argument("machine_name")
    return parser


def main(argv: list[str] | None = None, container: Container | None = None) -> int:
    """
    Point d'entrée principal.

    Retourne le code de sortie: 0 succès, 1 configuration introuvable, erreur métier ou JSON
    invalide.
    """
    args = _build_parser().parse_args(argv)
    c = container or get_container()
    setup_logging(c.settings.LOG_LEVEL)
    store = c.store

    try:
        if args.command == "init-db":
            init_schema(c.engine)
            print("schema ready")
            return 0

        if args.command == "list":
            for conf in sorted(store.list_configurations(), key=lambda x: x.id):
                print(f"{conf.id}\t{conf.machine_name}\t{conf.name}")
            return 0

        if args.command == "import":
            raw = sys.stdin.read() if args.path == "-" else Path(args.path).read_text("utf-8")
            configuration_id = import_configuration(store, json.loads(raw))
            print(f"imported id={configuration_id}")
            return 0

        configuration_id = store.get_configuration_id_by_machine_name(args.machine_name)
        if configuration_id is None:
            print(f"unknown configuration: {args.machine_name}", file=sys.stderr)
            return 1

        if args.command == "export":
            doc = export_configuration(store, configuration_id)
            print(json.dumps(doc, indent=2, sort_keys=True, ensure_ascii=False))
            return 0

        store.delete_configuration(configuration_id)
        print(f"deleted id={configuration_id}")
        return 0
    except (DisplayConfigError, ValueError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - script entry
    sys.exit(main())
