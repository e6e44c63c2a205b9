"""
LoveStack Backend — Marketing Pages
=====================================

Server-rendered HTML for the public site. Every page goes through the
conditional auth wrapper (app.rendering): client-facing pages under
/client/ are rendered without the standard auth provider and without the
main navigation.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from markupsafe import Markup

from app.rendering import is_client_route, render_nodes, wrap_with_auth_provider
from app.templating import render_fragment, templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], include_in_schema=False)


@dataclass(frozen=True)
class Page:
    template: str
    title: str
    context: Dict[str, Any] = field(default_factory=dict)


SERVICES = (
    {"name": "Web applications", "summary": "Full-stack products from first sketch to production."},
    {"name": "Cloud migration", "summary": "Moving legacy systems onto managed infrastructure."},
    {"name": "Data engineering", "summary": "Pipelines, reporting and the schemas behind them."},
    {"name": "Technical advisory", "summary": "Architecture reviews and hands-on team support."},
)

PAGES: Dict[str, Page] = {
    "/": Page("home.html", "Home"),
    "/about": Page("about.html", "About"),
    "/services": Page("services.html", "Services", {"services": SERVICES}),
    "/contact": Page("contact.html", "Contact"),
    "/client/forgot-password": Page(
        "forgot_password.html",
        "Client Password Reset",
        {"audience": "client", "reset_action": "/client/forgot-password"},
    ),
    "/team/forgot-password": Page(
        "forgot_password.html",
        "Team Password Reset",
        {"audience": "team", "reset_action": "/team/forgot-password"},
    ),
}


def render_page(request: Request) -> HTMLResponse:
    path = request.url.path
    page = PAGES[path]
    body = Markup(render_fragment(f"pages/{page.template}", **page.context))
    tree = wrap_with_auth_provider(path, [body])
    return templates.TemplateResponse(
        request,
        "layout.html",
        {
            "title": page.title,
            "content": render_nodes(tree),
            "show_navigation": not is_client_route(path),
        },
    )


for _path in PAGES:
    router.add_api_route(_path, render_page, methods=["GET"], response_class=HTMLResponse)
