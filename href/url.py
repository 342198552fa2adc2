import typing

import pydantic

from href import query
from href.components import UrlComponents
from href.components import parse
from href.config import Settings


def replace_placeholders(template: str, params: typing.Mapping[str, typing.Any]) -> str:
    for key, value in params.items():
        template = template.replace(f'{{{key}}}', str(value))
    return template


class Url(pydantic.BaseModel):
    """Immutable URL value.

    The source string is parsed on first access and the result is kept on the
    instance. Every ``with_*``/``without_*`` method returns a new ``Url`` and
    leaves the receiver untouched, so values can be shared and chained freely::

        url = Url('http://lalala.foobar.com').with_path('hello/{name}', {'name': 'peter'})
        str(url.with_prefix_path('say'))  # 'http://lalala.foobar.com/say/hello/peter'
    """

    source: str | None = None
    settings: Settings = pydantic.Field(default_factory=Settings)
    _components: UrlComponents | None = pydantic.PrivateAttr(default=None)
    # source the cached components belong to
    _parsed_source: str | None = pydantic.PrivateAttr(default=None)
    model_config = pydantic.ConfigDict(frozen=True)

    def __init__(self, source: str | None = None, **kwargs):
        super().__init__(source=source or None, **kwargs)

    @pydantic.model_validator(mode='wrap')
    @classmethod
    def restore_components(cls, data: typing.Any, handler) -> 'Url':
        components = None
        if isinstance(data, dict) and 'components' in data:
            data = dict(data)
            components = data.pop('components')
        url = handler(data)
        if components is not None:
            url._components = UrlComponents.model_validate(components)
            url._parsed_source = url.source
        return url

    @pydantic.model_serializer(mode='wrap')
    def serialize_components(self, handler) -> dict[str, typing.Any]:
        data = handler(self)
        data['source'] = self.to_string()
        data['components'] = self.components.model_dump()
        return data

    @classmethod
    def from_components(cls, components: UrlComponents, settings: Settings | None = None) -> 'Url':
        url = cls(settings=settings or Settings())
        url._components = components
        return url

    @property
    def components(self) -> UrlComponents:
        if self._components is None or self._parsed_source != self.source:
            if self.source:
                self._components = parse(self.source, strict=self.settings.strict)
            else:
                self._components = UrlComponents()
            self._parsed_source = self.source
        return self._components

    def _with_components(self, **changes) -> 'Url':
        return Url.from_components(self.components.replace(**changes), self.settings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Url):
            return NotImplemented
        return self.components == other.components and self.settings == other.settings

    def __hash__(self) -> int:
        return hash((self.components, self.settings))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f'Url({self.to_string()!r})'

    # accessors

    @property
    def scheme(self) -> str | None:
        return self.components.get('scheme') or self.settings.default_scheme

    @property
    def host(self) -> str | None:
        return self.components.get('host')

    @property
    def port(self) -> str | None:
        return self.components.get('port')

    @property
    def user(self) -> str | None:
        return self.components.get('user')

    @property
    def password(self) -> str | None:
        return self.components.get('password')

    @property
    def fragment(self) -> str | None:
        return self.components.get('fragment')

    def _host_labels(self) -> list[str]:
        host = self.host
        return host.split('.') if host else []

    @property
    def subdomain(self) -> str | None:
        return '.'.join(self._host_labels()[:-2]) or None

    @property
    def domain(self) -> str | None:
        labels = self._host_labels()
        if len(labels) < 2:
            return None
        return labels[-2] or None

    @property
    def top_level_domain(self) -> str | None:
        labels = self._host_labels()
        if not labels:
            return None
        return labels[-1] or None

    @property
    def path(self) -> str:
        return '/' + (self.components.path or '')

    @property
    def path_segments(self) -> list[str]:
        stored = self.components.path
        return stored.split('/') if stored else []

    def path_segment(self, segment: int) -> str | None:
        """Return the 1-indexed path segment, or None past the end.

        Positions below 1 read the first segment.
        """
        segments = self.path_segments
        segment = max(segment, 1)
        if segment <= len(segments):
            return segments[segment - 1] or None
        return None

    @property
    def query_params(self) -> query.QueryParams:
        return query.decode(self.components.query)

    def query_param(self, key: str) -> typing.Any:
        return self.query_params.get(key)

    # mutators

    def with_scheme(self, value: str) -> 'Url':
        return self._with_components(scheme=value)

    def with_host(self, value: str) -> 'Url':
        # accept a full origin such as 'https://example.com'
        url = self
        if value.find('://') > 0:
            scheme, value = value.split('://', 1)
            url = url.with_scheme(scheme)
        return url._with_components(host=value)

    def with_subdomain(self, value: str) -> 'Url':
        host = self.host
        if not host:
            return self
        subdomain = self.subdomain
        if subdomain:
            return self._with_components(host=value + host[len(subdomain) :])
        return self._with_components(host=f'{value}.{host}')

    def with_domain(self, value: str) -> 'Url':
        labels = self._host_labels()
        if not self.domain:
            return self
        labels[-2] = value
        return self._with_components(host='.'.join(labels))

    def with_top_level_domain(self, value: str) -> 'Url':
        labels = self._host_labels()
        if not self.top_level_domain:
            return self
        labels[-1] = value
        return self._with_components(host='.'.join(labels))

    def with_port(self, value: str | int) -> 'Url':
        return self._with_components(port=str(value))

    def with_user(self, value: str) -> 'Url':
        return self._with_components(user=value)

    def with_password(self, value: str) -> 'Url':
        return self._with_components(password=value)

    def with_path(self, value: str, params: typing.Mapping[str, typing.Any] | None = None) -> 'Url':
        path = value.rstrip('/')
        if params:
            path = replace_placeholders(path, params)
        return self._with_components(path=path)

    def with_prefix_path(self, value: str, params: typing.Mapping[str, typing.Any] | None = None) -> 'Url':
        path = value.rstrip('/') + '/' + self.path.strip('/')
        if params:
            path = replace_placeholders(path, params)
        return self._with_components(path=path)

    def with_trail_path(self, value: str, params: typing.Mapping[str, typing.Any] | None = None) -> 'Url':
        path = self.path.rstrip('/') + '/' + value.strip('/')
        if params:
            path = replace_placeholders(path, params)
        return self._with_components(path=path)

    def with_path_segment(self, segment: int, value: str) -> 'Url':
        """Replace the 1-indexed path segment, clamping the position into range."""
        segments = self.path_segments
        if not segments:
            return self._with_components(path=value)
        segment = min(max(segment, 1), len(segments))
        segments[segment - 1] = value
        return self._with_components(path='/'.join(segments))

    def with_query_param(self, key: str, value: typing.Any) -> 'Url':
        params = query.merge(self.query_params, {key: value})
        return self._with_components(query=query.encode(params))

    def with_query_params(self, params: typing.Mapping[str, typing.Any]) -> 'Url':
        url = self
        for key, value in params.items():
            url = url.with_query_param(key, value)
        return url

    def with_fragment(self, value: str) -> 'Url':
        return self._with_components(fragment=value.strip('/'))

    def without_host(self) -> 'Url':
        return self._with_components(host='')

    def without_subdomain(self) -> 'Url':
        host = self.host
        subdomain = self.subdomain
        if not host or not subdomain:
            return self
        return self._with_components(host=host[len(subdomain) + 1 :])

    def without_path(self) -> 'Url':
        return self._with_components(path='')

    def without_fragment(self) -> 'Url':
        return self._with_components(fragment='')

    def without_query_params(self) -> 'Url':
        return self._with_components(query='')

    def without_query_param(self, key: str) -> 'Url':
        params = self.query_params
        if not params:
            return self
        params.pop(key, None)
        return self._with_components(query=query.encode(params))

    def to_string(self) -> str:
        parts = []

        host = self.host
        if host:
            if self.scheme:
                parts.append(f'{self.scheme}:')
            parts.append('//')
            if self.user and self.password:
                parts.append(f'{self.user}:{self.password}@')
            parts.append(host)

        if self.port:
            parts.append(f':{self.port}')

        path = self.components.path or ''
        if not host or path:
            parts.append(f'/{path}')

        params = self.query_params
        if params:
            parts.append('?' + query.encode(dict(sorted(params.items()))))

        if self.fragment:
            parts.append(f'#{self.fragment}')

        return ''.join(parts)
