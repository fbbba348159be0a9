"""
HTML rendering of widgets
"""

from typing import Any, Protocol

from jinja2 import Environment, PackageLoader, select_autoescape


class Renderer(Protocol):
    """Turns a template name and a context into an HTML fragment"""

    def render(self, template_name: str, context: dict[str, Any]) -> str: ...


class JinjaRenderer:
    """Renderer backed by the templates bundled with the package"""

    def __init__(self, environment: Environment | None = None):
        self.environment = environment or Environment(
            loader=PackageLoader("releasarr", "templates"),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        template = self.environment.get_template(template_name)
        return template.render(**context)


def render_page(fragments: list[str], title: str = "Releasarr") -> str:
    """Wrap widget fragments into a standalone HTML page"""
    renderer = JinjaRenderer()
    return renderer.render("page.html", {"title": title, "fragments": fragments})
