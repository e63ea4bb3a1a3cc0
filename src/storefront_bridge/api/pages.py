"""Static HTML bodies served by the embed route."""

from html import escape

EMBEDDED_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>{app_name}</title>
  </head>
  <body data-shop="{shop}" data-host="{host}">
    <main>
      <h1>{app_name}</h1>
      <p>The app is installed and running inside your admin.</p>
    </main>
  </body>
</html>
"""


def render_embedded_page(app_name: str, shop: str | None, host: str | None) -> str:
    """Render the in-iframe page. All values are HTML-escaped."""
    return EMBEDDED_PAGE_TEMPLATE.format(
        app_name=escape(app_name),
        shop=escape(shop or ""),
        host=escape(host or ""),
    )


def render_fallback_page(app_name: str) -> str:
    return f"{escape(app_name)} App is installed"
