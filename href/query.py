import re
import typing
import urllib.parse

QueryParams = dict[str, typing.Any]

# name[a][b][] -> ('name', '[a][b][]')
_BRACKET_KEY = re.compile(r'^([^\[\]]+)((?:\[[^\[\]]*\])+)$')
_BRACKET_PART = re.compile(r'\[([^\[\]]*)\]')


def split_key(key: str) -> list[str]:
    match = _BRACKET_KEY.match(key)
    if match is None:
        return [key]
    return [match.group(1), *_BRACKET_PART.findall(match.group(2))]


def _next_index(container: dict) -> str:
    indexes = [int(key) for key in container if key.isdigit()]
    return str(max(indexes) + 1) if indexes else '0'


def _as_dict(items: list) -> dict:
    return {str(index): item for index, item in enumerate(items)}


def _assign(container: dict, names: list[str], value: str) -> None:
    name, *rest = names
    if not rest:
        container[name] = value
        return

    child = container.get(name)
    if rest == ['']:
        if isinstance(child, dict):
            child[_next_index(child)] = value
            return
        if not isinstance(child, list):
            child = container[name] = []
        child.append(value)
        return

    if isinstance(child, list):
        child = container[name] = _as_dict(child)
    elif not isinstance(child, dict):
        child = container[name] = {}
    _assign(child, rest, value)


def decode(query: str | None) -> QueryParams:
    """Decode a query string into a mapping.

    Later occurrences of a key override earlier ones. Bracket keys nest:
    ``a[b]=1`` becomes ``{'a': {'b': '1'}}`` and ``a[]=1&a[]=2`` becomes
    ``{'a': ['1', '2']}``. When both forms meet on one key, list items move
    under integer keys: ``a[]=1&a[x]=2`` becomes ``{'a': {'0': '1', 'x': '2'}}``.

    Bytes that are not valid UTF-8 are kept as surrogate escapes so that
    ``encode`` writes them back unchanged.
    """
    params: QueryParams = {}
    if not query:
        return params
    for key, value in urllib.parse.parse_qsl(query, keep_blank_values=True, errors='surrogateescape'):
        _assign(params, split_key(key), value)
    return params


def _scalar(value: typing.Any) -> str:
    if isinstance(value, bool):
        return '1' if value else '0'
    return str(value)


def _flatten(params: typing.Mapping, prefix: str | None = None) -> typing.Iterator[tuple[str, str]]:
    for key, value in params.items():
        name = str(key) if prefix is None else f'{prefix}[{key}]'
        if value is None:
            continue
        if isinstance(value, typing.Mapping):
            yield from _flatten(value, name)
        elif isinstance(value, (list, tuple)):
            for item in value:
                if item is not None:
                    yield f'{name}[]', _scalar(item)
        else:
            yield name, _scalar(value)


def encode(params: typing.Mapping[str, typing.Any]) -> str:
    return urllib.parse.urlencode(list(_flatten(params)), errors='surrogateescape')


def merge(base: typing.Mapping, override: typing.Mapping) -> QueryParams:
    """Scalars replace, mappings at the same key merge recursively."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, typing.Mapping) and isinstance(value, typing.Mapping):
            merged[key] = merge(current, value)
        else:
            merged[key] = value
    return merged
