"""Rich style strings for the sessions, passed in as a value."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    # Shared
    line_number: str = "#6B7280"
    footer: str = "#6B7280"
    unchanged: str = "#F3F4F6"

    # Review
    removed: str = "#FF6B6B on #3D1E1E"
    added: str = "#69DB7C on #1E3D1E"
    left_border: str = "#EF4444"
    right_border: str = "#10B981"
    left_title: str = "bold #EF4444"
    right_title: str = "bold #10B981"

    # Browse
    browse_border: str = "#7D56F4"
    secret_name: str = "bold #FBBF24"
    version: str = "#7D56F4"
    latest_badge: str = "bold #10B981"


DEFAULT_THEME = Theme()
