# automatic_trips/models/link_header.py
"""
Parser for the HTTP `Link` response header.

The Automatic API advertises neighbouring pages of a collection through
`Link` headers of the form:

    Link: <https://api.automatic.com/trip/?page=2>; rel="next",
          <https://api.automatic.com/trip/?page=1>; rel="previous"

`parse_link_header()` turns such a value into a LinkSet that can be queried
by relation name. Parsing is forgiving: an entry without a `rel` parameter
or without an angle-bracketed URI is skipped on its own and the remaining
entries are still returned.
"""

import logging
import re
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

__all__: list[str] = [
    'Link',
    'LinkSet',
    'parse_link_header',
]

logger: logging.Logger = logging.getLogger(__name__)

# A well-formed <uri>, a quoted string, an entry separator, plain text, or a
# stray bracket/quote. Commas inside the first two never split entries.
_ENTRY_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(
    r'<[^<>]*>|"(?:[^"\\]|\\.)*"|,|[^<",]+|[<"]'
)
_ENTRY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r'\s*<(?P<uri>[^<>]*)>(?P<params>.*)$', re.DOTALL
)
_PARAM_PATTERN: Final[re.Pattern[str]] = re.compile(
    r';\s*(?P<name>[^\s=;,]+)\s*(?:=\s*(?P<value>"(?:[^"\\]|\\.)*"|[^;]*))?'
)


class Link(BaseModel):
    """
    One relation advertised by a Link header.

    Attributes:
        relation: Lowercased relation type, e.g. 'next'.
        uri: Target URI exactly as it appeared between the angle brackets.
        params: Any other link parameters (e.g. 'title'), lowercased names.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    relation: str
    uri: str
    params: dict[str, str] = Field(default_factory=dict)


class LinkSet(BaseModel):
    """
    The Links parsed from one response, queried by relation name.

    Relation lookups are case-insensitive. When a relation appears more than
    once, the first occurrence wins.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    links: tuple[Link, ...] = ()

    def get(self, relation: str) -> Link | None:
        """Return the Link for a relation, or None if it is not present."""
        wanted: str = relation.lower()
        for link in self.links:
            if link.relation == wanted:
                return link
        return None

    def has(self, relation: str) -> bool:
        """Whether the relation is present."""
        return self.get(relation) is not None

    def uri(self, relation: str) -> str | None:
        """Target URI of a relation, or None if it is not present."""
        link: Link | None = self.get(relation)
        return link.uri if link is not None else None

    @property
    def relations(self) -> list[str]:
        """Distinct relation names in header order."""
        return list(dict.fromkeys(link.relation for link in self.links))

    def __contains__(self, relation: object) -> bool:
        return isinstance(relation, str) and self.has(relation)

    def __len__(self) -> int:
        return len(self.links)


# =============================================================================
# Parsing
# =============================================================================


def parse_link_header(header: str | None) -> LinkSet:
    """
    Parse a raw `Link` header value into a LinkSet.

    Args:
        header: Header value, or None when the response carried no Link
            header.

    Returns:
        LinkSet with one Link per (entry, relation) pair. Empty when the
        header is absent, blank, or holds only malformed entries.

    Example:
        >>> links = parse_link_header('<http://x/y?page=2>; rel="next"')
        >>> links.has('next')
        True
        >>> links.uri('next')
        'http://x/y?page=2'
    """
    if not header or not header.strip():
        return LinkSet()

    parsed_links: list[Link] = []

    for entry in _split_entries(header):
        parsed_links.extend(_parse_entry(entry))

    return LinkSet(links=tuple(parsed_links))


def _split_entries(header: str) -> list[str]:
    """Split a header value on commas that sit outside URIs and quoted strings."""
    entries: list[str] = []
    current_tokens: list[str] = []

    for token_match in _ENTRY_TOKEN_PATTERN.finditer(header):
        token: str = token_match.group(0)
        if token == ',':
            entries.append(''.join(current_tokens))
            current_tokens = []
        else:
            current_tokens.append(token)

    entries.append(''.join(current_tokens))

    return [entry.strip() for entry in entries if entry.strip()]


def _parse_entry(entry: str) -> list[Link]:
    """
    Parse a single `<uri>; param=value; ...` entry.

    Returns an empty list for malformed entries so one bad segment never
    aborts the whole header.
    """
    entry_match: re.Match[str] | None = _ENTRY_PATTERN.match(entry)
    if entry_match is None:
        logger.debug('Skipping Link entry without <uri>: %r', entry)
        return []

    uri: str = entry_match.group('uri').strip()
    if not uri:
        logger.debug('Skipping Link entry with empty URI: %r', entry)
        return []

    params: dict[str, str] = {}
    for param_match in _PARAM_PATTERN.finditer(entry_match.group('params')):
        name: str = param_match.group('name').lower()
        value: str = _unquote(param_match.group('value') or '')
        # RFC 8288: occurrences after the first are ignored
        params.setdefault(name, value)

    rel_value: str | None = params.pop('rel', None)
    if not rel_value or not rel_value.strip():
        logger.debug('Skipping Link entry without rel parameter: %r', entry)
        return []

    # rel may hold several space-separated relation types
    return [
        Link(relation=relation, uri=uri, params=params)
        for relation in rel_value.lower().split()
    ]


def _unquote(value: str) -> str:
    """Strip surrounding quotes and backslash escapes from a parameter value."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':  # noqa: PLR2004
        return re.sub(r'\\(.)', r'\1', value[1:-1])
    return value
