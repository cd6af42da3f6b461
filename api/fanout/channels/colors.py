"""Notification type -> accent color, shared by the Discord and Teams formatters."""

NOTIFICATION_COLORS: dict[str, str] = {
    "broadcast": "3B82F6",  # blue
    "task_assignment": "10B981",  # green
    "deadline_reminder": "F59E0B",  # amber
}

DEFAULT_COLOR = "6B7280"  # gray


def color_hex(notification_type: str) -> str:
    return NOTIFICATION_COLORS.get(notification_type, DEFAULT_COLOR)


def color_int(notification_type: str) -> int:
    return int(color_hex(notification_type), 16)
