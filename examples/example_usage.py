"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the workflow lives in the services. Expects the demo
workspace from ``scripts/seed_db.py``.
"""

import importlib

from config import get_settings_module

from src.hr_backoffice.hr_backoffice.container import build_container
from src.hr_backoffice.hr_backoffice.database.bootstrap import DEMO_WORKSPACE_ID


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    queue = container.review_service.review_queue(
        reviewer_id="u-mgr-1",
        reviewer_role="MANAGER",
        workspace_id=DEMO_WORKSPACE_ID,
    )
    for entry in queue:
        print(entry.to_dict())

    report = container.performance_service.performance_for(workspace_id=DEMO_WORKSPACE_ID, period="month")
    print(report.to_dict()["workspaceStats"])


if __name__ == "__main__":
    main()
