from __future__ import annotations

from flask import Flask, request

from ..common.responses import json_body, ok
from ..common.session import current_user_id, current_workspace_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    notifications = container.notification_service

    @app.route("/api/tasks/notifications", methods=["GET"], endpoint="list_notifications")
    @login_required
    def list_notifications():
        feed = notifications.notifications_for(
            user_id=current_user_id(),
            workspace_id=current_workspace_id(),
            kind=request.args.get("type") or "all",
        )
        return ok([n.to_dict() for n in feed], count=len(feed))

    @app.route("/api/tasks/notifications", methods=["POST"], endpoint="create_notification")
    @login_required
    def create_notification():
        body = json_body()
        notification = notifications.create_notification(
            user_id=body.get("userId"),
            workspace_id=current_workspace_id(),
            type=body.get("type"),
            title=body.get("title"),
            message=body.get("message"),
            priority=body.get("priority"),
            payload=body.get("data"),
        )
        return ok(notification.to_dict(), 201, message="Notification created successfully")
