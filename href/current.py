import logging
import typing

import pydantic

SchemeDetector = typing.Callable[[], str]


def default_scheme_detector() -> str:
    return 'http'


def environ_scheme_detector(environ: typing.Mapping[str, typing.Any]) -> SchemeDetector:
    """Build a detector reading a WSGI/CGI style environ mapping."""

    def detect() -> str:
        url_scheme = environ.get('wsgi.url_scheme')
        if url_scheme:
            return url_scheme
        https = str(environ.get('HTTPS', '')).lower()
        if (https and https != 'off') or str(environ.get('SERVER_PORT', '')) == '443':
            return 'https'
        return 'http'

    return detect


class RequestContext(pydantic.BaseModel):
    host: str = pydantic.Field(..., min_length=1, description='Host header of the request, port included')
    request_target: str = pydantic.Field(default='/', description='Path and query as sent on the request line')
    detect_scheme: SchemeDetector = pydantic.Field(default=default_scheme_detector, exclude=True)
    model_config = pydantic.ConfigDict(frozen=True)

    @classmethod
    def from_environ(cls, environ: typing.Mapping[str, typing.Any]) -> 'RequestContext':
        host = environ.get('HTTP_HOST') or environ.get('SERVER_NAME', '')
        request_target = environ.get('REQUEST_URI')
        if not request_target:
            request_target = environ.get('PATH_INFO') or '/'
            if environ.get('QUERY_STRING'):
                request_target += '?' + environ['QUERY_STRING']
        return cls(host=host, request_target=request_target, detect_scheme=environ_scheme_detector(environ))


def current_url(context: RequestContext) -> str:
    scheme = context.detect_scheme()
    url = f'{scheme}://{context.host}{context.request_target}'
    logging.debug(f'Built current URL {url} from host {context.host!r}')
    return url
