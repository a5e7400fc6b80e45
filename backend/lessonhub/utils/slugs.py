"""URL-friendly document identifiers"""
import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, collapse every run of non-alphanumerics to '-', trim the ends.

    >>> slugify("Jane Q")
    'jane-q'
    >>> slugify("  HTML Basics: Structure of a Webpage ")
    'html-basics-structure-of-a-webpage'
    """
    return _NON_ALNUM.sub("-", text.lower()).strip("-")
