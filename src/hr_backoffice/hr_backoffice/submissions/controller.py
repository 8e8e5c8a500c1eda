from __future__ import annotations

from flask import Flask

from ..common.responses import json_body, ok
from ..common.session import current_user_id, current_workspace_id, login_required
from ..container import Container
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    submissions = container.submission_service

    @app.route("/api/tasks/submission", methods=["POST"], endpoint="submit_task")
    @login_required
    def submit_task():
        body = json_body()
        user_id = current_user_id()
        # work is always submitted as the signed-in user
        if body.get("userId") not in (None, "", user_id):
            raise AuthorizationError("You can only submit work as yourself")
        submission = submissions.submit(
            task_id=body.get("taskId"),
            user_id=user_id,
            report=body.get("report"),
            file_url=body.get("fileUrl"),
        )
        return ok(submission.to_dict(), 201, message="Task submitted successfully")

    @app.route("/api/tasks/submission/<submission_id>/review", methods=["GET"], endpoint="submission_escalation")
    @login_required
    def submission_escalation(submission_id: str):
        status = submissions.get_submission_escalation(submission_id, workspace_id=current_workspace_id())
        return ok(status.to_dict())
