from __future__ import annotations

from flask import Flask, request

from ..common.responses import ok
from ..common.session import current_workspace_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    performance = container.performance_service

    @app.route("/api/tasks/performance", methods=["GET"], endpoint="task_performance")
    @login_required
    def task_performance():
        user_id = request.args.get("userId")
        report = performance.performance_for(
            workspace_id=current_workspace_id(),
            user_id=None if user_id in (None, "", "all") else user_id,
            period=request.args.get("period") or "all",
        )
        return ok(report.to_dict())
