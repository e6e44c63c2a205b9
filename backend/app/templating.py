"""Jinja2 environment shared by the HTML pages and the email bodies."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render_email(template_name: str, /, **context) -> str:
    """Render templates/emails/<template_name> to an HTML string."""
    return templates.get_template(f"emails/{template_name}").render(**context)


def render_fragment(template_name: str, /, **context) -> str:
    return templates.get_template(template_name).render(**context)
