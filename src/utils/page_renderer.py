"""Jinja2 rendering for the lead-facing report pages."""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.schemas.reports import ReportPage

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

NOT_FOUND_NO_ID = "Check your text message for the correct link."
NOT_FOUND_UNKNOWN = "We could not find this report."


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["times"] = lambda n: f"{n}×" if n else ""
    return env


def render_report(page: ReportPage, cta_url: str, cta_phone: str) -> str:
    template = get_environment().get_template("report.html")
    return template.render(page=page, cta_url=cta_url, cta_phone=cta_phone)


def render_not_found(message: str) -> str:
    template = get_environment().get_template("not_found.html")
    return template.render(message=message)
