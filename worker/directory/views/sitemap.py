from datetime import date
from typing import Optional
from xml.sax.saxutils import escape


def build_sitemap(host: str, today: Optional[date] = None) -> str:
    """Single-entry sitemap pointing at the site's root page."""
    lastmod = (today or date.today()).isoformat()
    loc = escape(f"https://{host}/")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        "  <url>\n"
        f"    <loc>{loc}</loc>\n"
        f"    <lastmod>{lastmod}</lastmod>\n"
        "    <changefreq>daily</changefreq>\n"
        "    <priority>1.0</priority>\n"
        "  </url>\n"
        "</urlset>"
    )
