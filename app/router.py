"""
Simple page router for Streamlit tabs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from app.pages.study import render_study_page
from app.pages.items import render_items_page
from app.pages.analytics import render_analytics_page
from core.config import Settings


@dataclass(frozen=True)
class AppPage:
    title: str
    render: Callable[[Settings], None]


PAGES = [
    AppPage(title="Study", render=render_study_page),
    AppPage(title="Items", render=render_items_page),
    AppPage(title="Analytics", render=render_analytics_page),
]
