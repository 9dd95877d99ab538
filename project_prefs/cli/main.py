"""
CLI entry point for project-prefs.

Usage
─────
  # Inspect the store
  project-prefs list
  project-prefs list --prefix editor.
  project-prefs get editor.show_grid
  project-prefs info

  # Write values
  project-prefs set editor.show_grid true --type bool
  project-prefs set recent_scenes intro outro --type set
  project-prefs add-to-set recent_scenes credits
  project-prefs remove-from-set recent_scenes intro
  project-prefs delete editor.show_grid

  # Maintenance
  project-prefs move 3 up
  project-prefs sort
  project-prefs edit            (PyQt6 editor)

  # Point at another file
  project-prefs --path ./ProjectPrefs.json --revision 7 list

Subcommands are implemented as standalone functions (cmd_list, cmd_get, ...)
so they can be unit-tested without invoking argparse.
"""

import argparse
import logging
import sys
from typing import Optional

from project_prefs.config import PrefsConfig
from project_prefs.exceptions import PrefsBaseError
from project_prefs.store.models import RecordType
from project_prefs.store.prefs_store import PrefsStore

__all__ = [
    "build_parser",
    "cmd_list",
    "cmd_get",
    "cmd_set",
    "cmd_delete",
    "cmd_add_to_set",
    "cmd_remove_from_set",
    "cmd_move",
    "cmd_sort",
    "cmd_info",
    "main",
]

logger = logging.getLogger(__name__)

# CLI spelling → record type
_TYPE_CHOICES = {
    "bool":   RecordType.BOOL,
    "int":    RecordType.INT,
    "float":  RecordType.FLOAT,
    "string": RecordType.STRING,
    "set":    RecordType.SET,
}


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: list | get | set | delete | add-to-set | remove-from-set |
                 move | sort | info | edit
    """
    parser = argparse.ArgumentParser(
        prog="project-prefs",
        description="Inspect and edit a typed preference store",
    )
    parser.add_argument(
        "--path",
        default=None,
        metavar="PATH",
        help="Preference file (default: $PROJECT_PREFS_PATH or ~/.project-prefs/prefs.json)",
    )
    parser.add_argument(
        "--revision",
        type=int,
        default=None,
        metavar="N",
        help="Revision stamped on a newly created store (default: $PROJECT_PREFS_REVISION or 0)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── list ──────────────────────────────────────────────────────────────
    lst = sub.add_parser("list", help="List stored preferences in order")
    lst.add_argument(
        "--prefix",
        default=None,
        metavar="PREFIX",
        help="Only show keys starting with PREFIX",
    )

    # ── get ───────────────────────────────────────────────────────────────
    get = sub.add_parser("get", help="Print the decoded value of a preference")
    get.add_argument("key", metavar="KEY")

    # ── set ───────────────────────────────────────────────────────────────
    st = sub.add_parser("set", help="Store a typed value")
    st.add_argument("key", metavar="KEY")
    st.add_argument(
        "values",
        nargs="+",
        metavar="VALUE",
        help="Value to store; several values are allowed for --type set",
    )
    st.add_argument(
        "--type",
        choices=sorted(_TYPE_CHOICES),
        default="string",
        help="Record type (default: string)",
    )

    # ── delete ────────────────────────────────────────────────────────────
    dl = sub.add_parser("delete", help="Remove a preference")
    dl.add_argument("key", metavar="KEY")

    # ── add-to-set / remove-from-set ──────────────────────────────────────
    add = sub.add_parser("add-to-set", help="Add an element to a set preference")
    add.add_argument("key", metavar="KEY")
    add.add_argument("value", metavar="VALUE")

    rem = sub.add_parser("remove-from-set", help="Remove an element from a set preference")
    rem.add_argument("key", metavar="KEY")
    rem.add_argument("value", metavar="VALUE")

    # ── move ──────────────────────────────────────────────────────────────
    mv = sub.add_parser("move", help="Move a record one position up or down")
    mv.add_argument("index", type=int, metavar="INDEX")
    mv.add_argument("direction", choices=["up", "down"])

    # ── sort / info / edit ────────────────────────────────────────────────
    sub.add_parser("sort", help="Sort records by key and sort every set")
    sub.add_parser("info", help="Show store path, revision and record count")
    sub.add_parser("edit", help="Open the graphical editor (requires PyQt6)")

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def _parse_cli_value(record_type: RecordType, values: list[str]):
    """Convert command-line text into the Python value for *record_type*."""
    if record_type is RecordType.SET:
        return values
    if len(values) != 1:
        raise ValueError(f"{record_type.value} preferences take exactly one value")
    return record_type.parse_value(values[0])


def _format_for_display(value) -> str:
    if isinstance(value, list):
        return "\n".join(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ── Command implementations ───────────────────────────────────────────────────


def cmd_list(store: PrefsStore, prefix: Optional[str] = None) -> None:
    """Print records to stdout in store order."""
    shown = 0
    for index, record in enumerate(store.records):
        if prefix and not record.key.startswith(prefix):
            continue
        print(f"[{index:>3}]  {record.key:<30} {record.type.value:<7} {record.value}")
        shown += 1
    if shown == 0:
        print("0 preferences found.")


def cmd_get(store: PrefsStore, key: str) -> None:
    """Print the decoded value of *key*; raises KeyError on a miss."""
    record = store.get_record(key)
    if record is None:
        raise KeyError(key)
    print(_format_for_display(store.get_value(key)))


def cmd_set(store: PrefsStore, key: str, values: list[str], type_name: str) -> None:
    """Parse *values* as *type_name* and store them under *key*."""
    record_type = _TYPE_CHOICES[type_name]
    value = _parse_cli_value(record_type, values)
    store.set_record(key, record_type, record_type.format_value(value))
    logger.info("Set %s (%s)", key, record_type.value)


def cmd_delete(store: PrefsStore, key: str) -> None:
    if not store.has_key(key):
        raise KeyError(key)
    store.delete_key(key)
    logger.info("Deleted %s", key)


def cmd_add_to_set(store: PrefsStore, key: str, value: str) -> None:
    store.add_to_set(key, value)


def cmd_remove_from_set(store: PrefsStore, key: str, value: str) -> None:
    store.remove_from_set(key, value)


def cmd_move(store: PrefsStore, index: int, direction: str) -> int:
    """Move the record at *index* one step and save. Returns its new index."""
    new_index = store.move_record(index, -1 if direction == "up" else 1)
    store.save()
    return new_index


def cmd_sort(store: PrefsStore) -> None:
    store.sort_records()
    store.save()
    print(f"Sorted {len(store)} preferences.")


def cmd_info(store: PrefsStore) -> None:
    print(f"path:     {store.path}")
    print(f"revision: {store.revision}")
    print(f"records:  {len(store)}")


def cmd_edit(store: PrefsStore) -> int:
    """Run the PyQt6 editor until its window is closed."""
    try:
        from project_prefs.gui.main_window import run_editor
    except ImportError as exc:
        raise ImportError(
            "PyQt6 is not installed. Run: pip install project-prefs[gui]"
        ) from exc
    return run_editor(store)


# ── Entry point ───────────────────────────────────────────────────────────────


def _resolve_config(ns: argparse.Namespace) -> PrefsConfig:
    config = PrefsConfig.from_env()
    if ns.path:
        config.path = ns.path
    if ns.revision is not None:
        config.default_revision = ns.revision
    return config


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    try:
        config = _resolve_config(ns)
        store = PrefsStore.open(config.path, default_revision=config.default_revision)
    except (ValueError, PrefsBaseError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        if ns.subcommand == "list":
            cmd_list(store, prefix=ns.prefix)
        elif ns.subcommand == "get":
            cmd_get(store, ns.key)
        elif ns.subcommand == "set":
            cmd_set(store, ns.key, ns.values, ns.type)
        elif ns.subcommand == "delete":
            cmd_delete(store, ns.key)
        elif ns.subcommand == "add-to-set":
            cmd_add_to_set(store, ns.key, ns.value)
        elif ns.subcommand == "remove-from-set":
            cmd_remove_from_set(store, ns.key, ns.value)
        elif ns.subcommand == "move":
            cmd_move(store, ns.index, ns.direction)
        elif ns.subcommand == "sort":
            cmd_sort(store)
        elif ns.subcommand == "info":
            cmd_info(store)
        elif ns.subcommand == "edit":
            return cmd_edit(store)
    except KeyError as exc:
        print(f"Error: no preference named {exc.args[0]!r}", file=sys.stderr)
        return 1
    except (ValueError, TypeError, IndexError, AssertionError, ImportError, PrefsBaseError) as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
