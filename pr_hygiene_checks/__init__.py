"""Post PR hygiene status checks (files and lines changed) to GitHub.

Each PR build counts the PR's changed files, minus ignored paths, and reports
whether the counts stay within the configured limits as two commit statuses.
"""

from .checker import HygieneChecker, run_hygiene_checks
from .cli import main
from .models import HygieneConfig, RunReport, RunState

__all__ = ["main", "HygieneChecker", "run_hygiene_checks", "HygieneConfig", "RunReport", "RunState"]

if __name__ == "__main__":
    main()
