"""HR back office: task lifecycle & review workflow.

This package is organized by feature modules (tasks, submissions, reviews,
notifications, performance, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
