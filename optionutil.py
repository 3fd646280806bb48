# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
Encoding of `key=value` options and property maps into single-line strings.

Options are opaque `key=value` strings that are prefixed and joined, e.g. into
`--build-arg a=b --build-arg c=d` or into a Dockerfile `LABEL` directive. Property maps
are encoded into the query fragments understood by Artifactory's property search
(`k1=v1&k2=v2&`) and property mutation (`properties=k1=v1|k2=v2|&recursive=0`) APIs.

All functions in this module are pure: inputs are never modified, and identical inputs
always yield identical outputs (property maps are iterated in insertion order).
'''

import collections.abc
import typing

PropertyMap = typing.Mapping[str, typing.Any] | typing.Sequence[tuple[str, typing.Any]]


def _options(options: typing.Iterable[str]) -> tuple[str, ...]:
    if options is None:
        raise ValueError('options must not be None')
    if isinstance(options, (str, bytes)) or not isinstance(options, collections.abc.Iterable):
        raise ValueError(f'options must be an iterable of strings, got {type(options)}')

    options = tuple(options)
    for option in options:
        if not isinstance(option, str):
            raise ValueError(f'{option=} is not a string')

    return options


def _property_items(properties: PropertyMap) -> tuple[tuple[str, typing.Any], ...]:
    if properties is None:
        raise ValueError('properties must not be None')

    if isinstance(properties, collections.abc.Mapping):
        return tuple(properties.items())

    if isinstance(properties, (str, bytes)) or not isinstance(
        properties,
        collections.abc.Iterable,
    ):
        raise ValueError(f'properties must be a mapping, got {type(properties)}')

    items = tuple(properties)
    for item in items:
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise ValueError(f'{item=} is not a (key, value) pair')

    return tuple((key, value) for key, value in items)


def build_option_string(
    options: typing.Iterable[str],
    key_prefix: str,
    separator: str=' ',
) -> str:
    '''
    prepends `key_prefix` to each of the given options and joins the results using
    `separator`. Newline characters are removed from the result, so it can be used as
    part of a single-line shell command or Dockerfile directive.

    >>> build_option_string(['a=b', 'c=d'], '--build-arg ')
    '--build-arg a=b --build-arg c=d'

    @raises ValueError: if options is None or not an iterable of strings
    '''
    options = _options(options)

    return separator.join(
        key_prefix + option for option in options
    ).replace('\n', '')


def command_options(
    options: typing.Iterable[str],
    key_option: str,
    separator: str=' ',
) -> str:
    '''
    builds command line options, e.g. `--build-arg a=b --build-arg c=d`
    '''
    return build_option_string(
        options=options,
        key_prefix=key_option,
        separator=separator,
    )


def compose_options(
    mandatory: typing.Iterable[str],
    custom: typing.Iterable[str] | None,
    key_prefix: str,
    separator: str,
) -> str:
    '''
    like `build_option_string`, but for the concatenation of mandatory and (optional)
    custom options. Passing `None` as custom options is equivalent to passing no custom
    options at all.
    '''
    options = _options(mandatory)
    if custom is not None:
        options += _options(custom)

    return build_option_string(
        options=options,
        key_prefix=key_prefix,
        separator=separator,
    )


def encode_search_query(properties: PropertyMap) -> str:
    '''
    encodes the given properties into a query fragment for Artifactory's property search
    (`/api/search/prop?`). Each property is terminated by `&`, so the result is either
    empty or ends with `&`.

    >>> encode_search_query({'k1': 'v1', 'k2': 'v2'})
    'k1=v1&k2=v2&'
    '''
    return ''.join(
        f'{key}={value}&' for key, value in _property_items(properties)
    )


def encode_property_mutation(
    properties: PropertyMap,
    recursive: bool=False,
) -> str:
    '''
    encodes the given properties into the query used for setting properties on an
    artifact (or folder, in which case `recursive` controls whether properties are
    also set on contained artifacts).

    >>> encode_property_mutation({'k1': 'v1'}, recursive=True)
    'properties=k1=v1|&recursive=1'
    '''
    properties_str = ''.join(
        f'{key}={value}|' for key, value in _property_items(properties)
    )
    recursive_flag = 1 if recursive else 0

    return f'properties={properties_str}&recursive={recursive_flag}'
