import logging
import urllib.parse

import pydantic

COMPONENT_NAMES = ('scheme', 'host', 'port', 'user', 'password', 'path', 'query', 'fragment')


class UrlParseError(ValueError):
    def __init__(self, raw: str, reason: str = ''):
        self.raw = raw
        self.reason = reason
        message = f'Invalid URL: {raw!r}'
        if reason:
            message += f' ({reason})'
        super().__init__(message)


class UrlComponents(pydantic.BaseModel):
    """The eight parts of a URL.

    ``None`` means the part was never set, ``''`` means it was explicitly
    cleared. Paths are stored without leading or trailing slashes.
    """

    scheme: str | None = None
    host: str | None = None
    port: str | None = None
    user: str | None = None
    password: str | None = pydantic.Field(default=None, alias='pass')
    path: str | None = None
    query: str | None = None
    fragment: str | None = None
    model_config = pydantic.ConfigDict(frozen=True, extra='forbid', populate_by_name=True)

    @pydantic.field_validator('path')
    @classmethod
    def strip_slashes(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip('/')

    def get(self, name: str) -> str | None:
        # empty and absent read the same
        return getattr(self, name) or None

    def replace(self, **changes) -> 'UrlComponents':
        return UrlComponents.model_validate({**self.model_dump(), **changes})


def split_netloc(netloc: str) -> tuple[str | None, str | None, str | None, str | None]:
    if not netloc:
        return None, None, None, None

    user = password = None
    userinfo, at, hostport = netloc.rpartition('@')
    if at:
        user, colon, secret = userinfo.partition(':')
        if colon:
            password = secret

    port = None
    host = hostport
    if ':' in hostport:
        host, _, port = hostport.rpartition(':')
        if not port:
            port = None
        elif not port.isdigit():
            raise ValueError(f'Port could not be cast to integer value as {port!r}')

    return user, password, host, port


def parse(raw: str, strict: bool = False) -> UrlComponents:
    try:
        parts = urllib.parse.urlsplit(raw)
        user, password, host, port = split_netloc(parts.netloc)
    except ValueError as e:
        if strict:
            raise UrlParseError(raw, str(e)) from e
        logging.debug(f'Could not parse URL {raw!r}, leaving all components empty: {e}')
        return UrlComponents()

    return UrlComponents(
        scheme=parts.scheme or None,
        host=host,
        port=port,
        user=user,
        password=password,
        path=parts.path or None,
        query=parts.query or None,
        fragment=parts.fragment or None,
    )
