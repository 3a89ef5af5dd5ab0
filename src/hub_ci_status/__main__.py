"""Allow ``python -m hub_ci_status``."""

from hub_ci_status.cli import main

raise SystemExit(main())
