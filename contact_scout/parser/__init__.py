"""contact_scout.parser: разбор отрисованного HTML."""

from .html_parser import Anchor, ParsedPage, parse_html

__all__ = ["Anchor", "ParsedPage", "parse_html"]
