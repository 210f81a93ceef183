"""HTML rendering for the device status page.

Renderers turn a ``HostSnapshot`` into HTML and do no I/O; the CLI decides
where the page goes. Fragment templates (``devices.html.j2``) are wrapped by
``base.html.j2``, which holds the page chrome and the CSS.

Public API:
  - devices: device_rows, build_device_table_html, build_status_page
"""

from __future__ import annotations

from typing import Any

import jinja2

_jinja_env = jinja2.Environment(
    loader=jinja2.PackageLoader("wuweather", "templates"),
    autoescape=jinja2.select_autoescape(["html", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_template(template_name: str, **context: Any) -> str:
    return _jinja_env.get_template(template_name).render(**context)
