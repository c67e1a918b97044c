"""
WebinarFuel widget URL parsing.

A widget configuration URL looks like
``https://app.webinarfuel.com/webinars/<webinar>/widgets/<widget_id>/<version>/elements``.
"""
import re
from typing import NamedTuple, Optional

WIDGET_URL_PATTERN = re.compile(r'/widgets/(\d+)/(\d+)/elements')


class WidgetRef(NamedTuple):
    widget_id: str
    version: str


def parse_widget_url(url) -> Optional[WidgetRef]:
    """Return the widget id and version as strings, or None when the URL does not match."""
    if not url or not isinstance(url, str):
        return None
    match = WIDGET_URL_PATTERN.search(url)
    if not match:
        return None
    return WidgetRef(widget_id=match.group(1), version=match.group(2))
