"""Allow ``python -m project_prefs``."""

from project_prefs.cli.main import main

raise SystemExit(main())
