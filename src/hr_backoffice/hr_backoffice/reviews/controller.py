from __future__ import annotations

from flask import Flask

from ..common.responses import json_body, ok
from ..common.session import current_role, current_user_id, current_workspace_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reviews = container.review_service

    @app.route("/api/tasks/submission/<submission_id>/review", methods=["POST"], endpoint="review_submission")
    @login_required
    def review_submission(submission_id: str):
        body = json_body()
        submission = reviews.review(
            submission_id=submission_id,
            reviewer_id=current_user_id(),
            reviewer_role=body.get("role") or current_role(),
            workspace_id=current_workspace_id(),
            decision=body.get("status"),
            quality_points=body.get("qualityPoints"),
            bonus_points=body.get("bonusPoints"),
            remarks=body.get("remarks"),
        )
        return ok(submission.to_dict(), message=f"Task submission {submission.status.value}")

    @app.route("/api/tasks/reviews/pending", methods=["GET"], endpoint="pending_reviews")
    @login_required
    def pending_reviews():
        queue = reviews.review_queue(
            reviewer_id=current_user_id(),
            reviewer_role=current_role(),
            workspace_id=current_workspace_id(),
        )
        return ok([entry.to_dict() for entry in queue])
