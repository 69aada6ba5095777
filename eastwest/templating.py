from __future__ import annotations

from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape


# HTML templates are autoescaped; the bootstrap script template is not and
# passes every value through ``tojson``.
_env = Environment(
    loader=PackageLoader("eastwest", "templates"),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_template(name: str, **context: Any) -> str:
    """Render a packaged Jinja2 template."""
    return _env.get_template(name).render(**context)
