# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import dataclasses
import typing

import dacite

dc = dataclasses.dataclass


class ArtifactoryError(RuntimeError):
    pass


@dc(frozen=True)
class SearchResultEntry:
    uri: str


@dc(frozen=True)
class PropertySearchResult:
    results: tuple[SearchResultEntry, ...] = ()

    @staticmethod
    def from_dict(raw: dict) -> 'PropertySearchResult':
        if not isinstance(raw, dict):
            raise ArtifactoryError(f'unexpected search result: {raw=}')
        try:
            return dacite.from_dict(
                data_class=PropertySearchResult,
                data={'results': raw.get('results') or ()},
                config=dacite.Config(cast=[tuple]),
            )
        except dacite.DaciteError as e:
            raise ArtifactoryError(f'unexpected search result: {raw=}') from e

    def last_uri(self) -> str | None:
        if not self.results:
            return None
        return self.results[-1].uri


@dc(frozen=True, kw_only=True)
class DockerPromotion:
    '''
    promotion of a docker image (tag) from a development repository to a target repository
    '''
    source_repository: str
    target_repository: str
    docker_repository: str
    tag: str
    target_tag: str
    copy: bool = False

    def as_request_body(self) -> dict:
        return {
            'targetRepo': self.target_repository,
            'dockerRepository': self.docker_repository,
            'tag': self.tag,
            'targetTag': self.target_tag,
            'copy': self.copy,
        }


@dc(frozen=True)
class FileSpec:
    pattern: str
    target: str
    props: str | None = None
    flat: bool = False
    recursive: bool = True


@dc(frozen=True)
class UploadSpec:
    '''
    subset of JFrog's "file specs" (https://jfrog.com/help/r/jfrog-integrations-documentation/
    using-file-specs) relevant for uploads
    '''
    files: tuple[FileSpec, ...]

    @staticmethod
    def from_dict(raw: dict) -> 'UploadSpec':
        def to_bool(value: bool | str) -> bool:
            if isinstance(value, bool):
                return value
            return str(value).lower() == 'true'

        try:
            return dacite.from_dict(
                data_class=UploadSpec,
                data=raw,
                config=dacite.Config(
                    cast=[tuple],
                    type_hooks={bool: to_bool},
                ),
            )
        except dacite.DaciteError as e:
            raise ValueError(f'invalid upload spec: {e}') from e


@dc(frozen=True)
class UploadedArtifact:
    name: str
    path: str # <repository>/<path> below artifactory base-url
    sha1: str
    sha256: str
    md5: str
    type: str | None = None

    def as_build_info_artifact(self) -> dict:
        return {
            'type': self.type,
            'sha1': self.sha1,
            'sha256': self.sha256,
            'md5': self.md5,
            'name': self.name,
            'path': self.path,
        }


@dc(frozen=True)
class BuildInfoEnvFilter:
    include_patterns: tuple[str, ...] = ('*',)
    exclude_patterns: tuple[str, ...] = ('*PASSWORD*', '*password*')


@dc(frozen=True, kw_only=True)
class BuildInfo:
    '''
    build-info (https://github.com/jfrog/build-info) to be published to Artifactory. Instances
    are immutable; use `dataclasses.replace` (or the helpers in `artifactoryutil.buildinfo`) to
    derive updated build-infos.
    '''
    name: str
    number: str
    started: str
    module_id: str | None = None
    artifacts: tuple[UploadedArtifact, ...] = ()
    env: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    agent: str = 'pipeline-helpers'

    def as_dict(self) -> dict:
        build_info = {
            'version': '1.0.1',
            'name': self.name,
            'number': self.number,
            'started': self.started,
            'agent': {'name': self.agent},
            'modules': [
                {
                    'id': self.module_id or self.name,
                    'artifacts': [a.as_build_info_artifact() for a in self.artifacts],
                },
            ],
        }
        if self.env:
            build_info['properties'] = {
                f'buildInfo.env.{k}': v for k, v in self.env.items()
            }

        return build_info
