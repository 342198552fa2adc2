import os

import pydantic


class Settings(pydantic.BaseModel):
    # scheme reported when the URL itself carries none, e.g. 'http'
    default_scheme: str | None = None
    # raise UrlParseError instead of falling back to empty components
    strict: bool = False
    model_config = pydantic.ConfigDict(frozen=True)

    @classmethod
    def from_env(cls, prefix: str = 'HREF_') -> 'Settings':
        values = {}
        default_scheme = os.getenv(f'{prefix}DEFAULT_SCHEME')
        if default_scheme:
            values['default_scheme'] = default_scheme
        strict = os.getenv(f'{prefix}STRICT')
        if strict:
            values['strict'] = strict
        return cls(**values)
