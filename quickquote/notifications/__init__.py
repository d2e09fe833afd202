"""Notification and confirmation gateway."""

from quickquote.notifications.gateway import NotificationGateway

__all__ = ["NotificationGateway"]
