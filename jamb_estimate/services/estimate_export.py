"""Print / export sheet for JAMB Estimate.

Renders an ``OrderViewModel`` (live estimate or persisted order) into an
unstyled HTML sheet with Jinja2. Both sources go through the same template.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape

from jamb_estimate.models.estimate import OrderHeader, OrderViewModel, ViewSource
from jamb_estimate.utils.formatting import format_currency, format_signed_currency

logger = structlog.get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"
PRINT_TEMPLATE = "estimate_print.html"


# =============================================================================
# Template Engine Setup
# =============================================================================


def _get_jinja_env() -> Environment:
    """
    Create and configure Jinja2 environment.

    Returns:
        Configured Jinja2 Environment with money filters
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["money"] = format_currency
    env.filters["signed_money"] = format_signed_currency
    env.filters["qty"] = lambda value: f"{value:g}"
    return env


# =============================================================================
# Rendering
# =============================================================================


def render_print_sheet(
    view: OrderViewModel,
    header: Optional[OrderHeader] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render the print sheet.

    Args:
        view: View model to render
        header: Header override (defaults to view.header)
        generated_at: Timestamp printed on the sheet

    Returns:
        Rendered HTML string
    """
    env = _get_jinja_env()
    template = env.get_template(PRINT_TEMPLATE)
    header = header or view.header
    is_order = view.source == ViewSource.PERSISTED

    context = {
        "title": "Order" if is_order else "Estimate",
        "is_order": is_order,
        "header": header,
        "generated_at": (generated_at or datetime.now()).strftime("%B %d, %Y"),
        "sections": view.sections,
        "totals": view.totals,
        "total_in_words": view.total_in_words,
        "materials": view.materials_specification,
        "materials_total": sum(entry.total_cost for entry in view.materials_specification),
    }

    html = template.render(**context)
    logger.info(
        "print_sheet_rendered",
        source=view.source.value,
        reference=header.reference,
        items=len(view.line_items()),
    )
    return html
