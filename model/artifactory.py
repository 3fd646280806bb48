# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import os
import typing

import ci.util

from model.base import (
    BasicCredentials,
    ConfigElementNotFoundError,
    ModelDefaultsMixin,
    ModelValidationError,
    NamedModelElement,
)


class ArtifactoryCredentials(BasicCredentials):
    pass


class ArtifactoryConfig(NamedModelElement, ModelDefaultsMixin):
    '''
    Not intended to be instantiated by users of this module (use `find_config` or
    `config_from_env`)
    '''
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._apply_defaults(self.raw)

    def _defaults_dict(self):
        return {
            'tls_verify': True,
        }

    def _required_attributes(self):
        return {
            'base_url',
            'credentials',
        }

    def _optional_attributes(self):
        return {
            'docker_registry',
            'tls_verify',
        }

    def validate(self):
        super().validate()
        if not isinstance(self.raw['credentials'], dict):
            raise ModelValidationError(f'{self.name()}: credentials must be a mapping')
        self.credentials().validate()

    def base_url(self) -> str:
        return self.raw['base_url'].rstrip('/')

    def credentials(self) -> ArtifactoryCredentials:
        return ArtifactoryCredentials(self.raw['credentials'])

    def tls_verify(self) -> bool:
        return bool(self.raw['tls_verify'])

    def docker_registry(self) -> str | None:
        return self.raw.get('docker_registry')


def find_config(
    cfg_file: str,
    name: str,
) -> ArtifactoryConfig:
    '''
    reads the Artifactory configuration of the given name from a YAML file of the form:

        <name>:
          base_url: https://artifactory.example.com/artifactory
          credentials:
            username: <user>
            password: <password>
    '''
    raw = ci.util.parse_yaml_file(cfg_file)
    if not isinstance(raw, dict) or name not in raw:
        raise ConfigElementNotFoundError(f'no artifactory config named {name} in {cfg_file}')

    cfg = ArtifactoryConfig(name=name, raw_dict=raw[name])
    cfg.validate()
    return cfg


def config_from_env(
    env: typing.Mapping[str, str]=None,
    name: str='env',
) -> ArtifactoryConfig:
    '''
    creates an Artifactory configuration from `ARTIFACTORY_URL`, `ARTIFACTORY_LOGIN` and
    `ARTIFACTORY_PASSWORD` (and optionally `ARTIFACTORY_DOCKER_REGISTRY`)
    '''
    if env is None:
        env = os.environ

    missing = [
        var for var in ('ARTIFACTORY_URL', 'ARTIFACTORY_LOGIN', 'ARTIFACTORY_PASSWORD')
        if not env.get(var)
    ]
    if missing:
        raise ModelValidationError(f'env vars must be set: {", ".join(missing)}')

    raw = {
        'base_url': env['ARTIFACTORY_URL'],
        'credentials': {
            'username': env['ARTIFACTORY_LOGIN'],
            'password': env['ARTIFACTORY_PASSWORD'],
        },
    }
    if (registry := env.get('ARTIFACTORY_DOCKER_REGISTRY')):
        raw['docker_registry'] = registry

    cfg = ArtifactoryConfig(name=name, raw_dict=raw)
    cfg.validate()
    return cfg
