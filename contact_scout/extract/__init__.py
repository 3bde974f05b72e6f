"""contact_scout.extract: извлечение телефонов, ссылок на соцсети и адресов."""

from .addresses import AddressExtractor, find_contact_links
from .base import BaseExtractor, safe_extract
from .phones import PhoneExtractor
from .social import SocialLinkExtractor

__all__ = [
    "AddressExtractor",
    "BaseExtractor",
    "PhoneExtractor",
    "SocialLinkExtractor",
    "find_contact_links",
    "safe_extract",
]
