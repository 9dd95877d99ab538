"""
cli — command-line interface for project-prefs.

Entry points
────────────
  python -m project_prefs   (via project_prefs/__main__.py)
  project-prefs             (via pyproject.toml [project.scripts])

Subcommands: list | get | set | delete | add-to-set | remove-from-set |
             move | sort | info | edit
"""

from project_prefs.cli.main import build_parser, cmd_get, cmd_list, cmd_set, main

__all__ = ["build_parser", "cmd_get", "cmd_list", "cmd_set", "main"]
