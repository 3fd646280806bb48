# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import glob
import hashlib
import json
import logging
import os
import shutil
import typing

from functools import partial

import requests

import artifactoryutil.buildinfo as abi
import ci.log
import dockerutil
import optionutil
from buildmetadata import (
    BuildEnvironment,
    docker_image_properties,
)
from ci.util import not_empty, not_none, urljoin
from http_requests import check_http_code, mount_default_adapter
from model.artifactory import ArtifactoryConfig
from artifactoryutil.model import (
    ArtifactoryError,
    BuildInfo,
    DockerPromotion,
    FileSpec,
    PropertySearchResult,
    UploadSpec,
    UploadedArtifact,
)

logger = logging.getLogger(__name__)
ci.log.configure_default_logging()


class ArtifactoryApiRoutes:
    '''
    calculates API routes (URLs) for the subset of Artifactory's REST API used by this module

    Not intended to be instantiated by users of this module
    '''

    def __init__(self, base_url: str):
        self._base_url = not_empty(base_url)
        self._api_url = partial(self._url, 'api')

    def _url(self, *parts):
        return urljoin(self._base_url, *parts)

    def search_prop(self, query: str):
        return self._api_url('search', 'prop') + '?' + query

    def storage(self, repository: str, *path: str):
        return self._api_url('storage', repository, *path)

    def docker_promote(self, dev_repository: str):
        return self._api_url('docker', dev_repository, 'v2', 'promote')

    def build(self):
        return self._api_url('build')

    def artifact(self, repository_path: str):
        return self._url(repository_path)


class ArtifactoryApi:
    def __init__(
        self,
        api_routes: ArtifactoryApiRoutes,
        artifactory_cfg: ArtifactoryConfig,
    ):
        self._routes = not_none(api_routes)
        self._cfg = not_none(artifactory_cfg)
        self._credentials = artifactory_cfg.credentials()
        self._tls_verify = artifactory_cfg.tls_verify()

        self._session = requests.Session()
        mount_default_adapter(
            session=self._session,
        )

    def _request(self, method, *args, **kwargs):
        return partial(
            method,
            auth=self._credentials.as_tuple(),
            verify=self._tls_verify,
        )(*args, **kwargs)

    @check_http_code
    def _get(self, *args, **kwargs):
        return self._request(self._session.get, *args, **kwargs)

    @check_http_code
    def _post(self, *args, **kwargs):
        return self._request(self._session.post, *args, **kwargs)

    @check_http_code
    def _put(self, *args, **kwargs):
        return self._request(self._session.put, *args, **kwargs)

    def _json(self, response: requests.Response):
        try:
            return response.json()
        except ValueError as e:
            raise ArtifactoryError(
                f'expected JSON from {response.url}, got {response.text[:200]!r}'
            ) from e

    def search_by_properties(
        self,
        properties: optionutil.PropertyMap | str,
    ) -> PropertySearchResult:
        '''
        searches for artifacts carrying all the given properties

        @param properties: either a mapping of property names to values, or an already encoded
            query (`prop1=val1&prop2=val2&`)
        '''
        if isinstance(properties, str):
            query = properties
        else:
            query = optionutil.encode_search_query(properties)

        url = self._routes.search_prop(query=query)
        logger.info(f'searching artifacts: {url=}')

        res = self._get(url=url)

        return PropertySearchResult.from_dict(self._json(res))

    def uri_by_properties(
        self,
        properties: optionutil.PropertyMap | str,
    ) -> str | None:
        '''
        returns the URI of the (last) artifact carrying all the given properties, or None if
        there is no such artifact. Failed requests are not reported as absence, but raise
        `requests.HTTPError` (or `ArtifactoryError` for unexpected responses).
        '''
        return self.search_by_properties(properties=properties).last_uri()

    def set_properties(
        self,
        artifact_url: str,
        properties: optionutil.PropertyMap,
        recursive: bool=False,
    ):
        '''
        sets the given properties on the artifact (or folder) referenced by artifact_url.

        @param recursive: if artifact_url is a folder, whether to also set properties on
            contained artifacts
        '''
        query = optionutil.encode_property_mutation(
            properties=properties,
            recursive=recursive,
        )
        url = f'{artifact_url}?{query}'
        logger.info(f'setting properties: {url=}')

        self._put(url=url)

    def properties_for_artifact(self, artifact_url: str) -> dict[str, list[str]]:
        '''
        returns the properties of the given artifact (empty if it has none)
        '''
        try:
            res = self._get(url=f'{artifact_url}?properties')
        except requests.HTTPError as e:
            # artifactory answers w/ 404 for items w/o properties
            if e.response is not None and e.response.status_code == 404:
                logger.info(f'no properties found for {artifact_url=}')
                return {}
            raise

        raw = self._json(res)
        if not isinstance(raw, dict):
            raise ArtifactoryError(f'unexpected properties response for {artifact_url}')

        return raw.get('properties', {})

    def promote_docker_image(self, promotion: DockerPromotion):
        url = self._routes.docker_promote(dev_repository=promotion.source_repository)
        body = promotion.as_request_body()
        logger.info(f'promoting docker image: {url=} {json.dumps(body)}')

        self._post(
            url=url,
            json=body,
        )

    def upload_docker_image(
        self,
        registry: str,
        image: str,
        version: str,
        repository: str,
        build_env: BuildEnvironment,
    ) -> str:
        '''
        pushes the given (local) docker image to the given registry (backed by the given
        Artifactory docker repository) and attaches build metadata to it

        @return: the storage URL of the pushed image
        '''
        cfg_dir = dockerutil.docker_login_cfg(
            registry=registry,
            username=self._credentials.username(),
            password=self._credentials.passwd(),
        )
        try:
            dockerutil.docker_push(
                image_ref=dockerutil.image_reference(
                    registry=registry,
                    image=image,
                    version=version,
                ),
                cfg_dir=cfg_dir,
            )
        finally:
            shutil.rmtree(cfg_dir, ignore_errors=True)

        image_url = self._routes.storage(repository, image, version)
        self.set_properties(
            artifact_url=image_url,
            properties=docker_image_properties(
                build_env=build_env,
                version=version,
            ),
        )

        return image_url

    def _upload_file(
        self,
        path: str,
        target_path: str,
        props: str | None,
    ) -> UploadedArtifact:
        digests = {
            'sha1': hashlib.sha1(),
            'sha256': hashlib.sha256(),
            'md5': hashlib.md5(),
        }
        with open(path, 'rb') as f:
            while (chunk := f.read(1024 * 1024)):
                for digest in digests.values():
                    digest.update(chunk)
        checksums = {name: digest.hexdigest() for name, digest in digests.items()}

        url = self._routes.artifact(target_path)
        if props:
            url = f'{url};{props}'

        logger.info(f'uploading {path} to {url}')
        with open(path, 'rb') as f:
            self._put(
                url=url,
                data=f,
                headers={
                    'X-Checksum-Sha1': checksums['sha1'],
                    'X-Checksum-Sha256': checksums['sha256'],
                    'X-Checksum': checksums['md5'],
                },
            )

        name = os.path.basename(path)
        _, extension = os.path.splitext(name)
        return UploadedArtifact(
            name=name,
            path=target_path,
            type=extension.lstrip('.') or None,
            **checksums,
        )

    def upload_files(
        self,
        upload_spec: UploadSpec | dict | str,
    ) -> list[UploadedArtifact]:
        '''
        uploads local files as specified by the given upload spec (either an `UploadSpec`, its
        dict representation, or the same as JSON text)
        '''
        if isinstance(upload_spec, str):
            upload_spec = json.loads(upload_spec)
        if isinstance(upload_spec, dict):
            upload_spec = UploadSpec.from_dict(upload_spec)

        uploaded = []
        for file_spec in upload_spec.files:
            matches = _matching_files(file_spec)
            if not matches:
                logger.warning(f'no files matched {file_spec.pattern=}')
            for path, target_path in matches:
                uploaded.append(
                    self._upload_file(
                        path=path,
                        target_path=target_path,
                        props=file_spec.props,
                    )
                )

        return uploaded

    def publish_build_info(self, build_info: BuildInfo):
        logger.info(f'publishing build-info {build_info.name=} {build_info.number=}')
        self._put(
            url=self._routes.build(),
            data=json.dumps(build_info.as_dict()),
            headers={'Content-Type': 'application/json'},
        )


def _relative_path(path: str) -> str:
    '''
    returns the given local path as relative, slash-separated path w/o `.` or `..` segments.
    Absolute paths are stripped of their leading separator (and drive).
    '''
    _, path = os.path.splitdrive(os.path.normpath(path))
    return '/'.join(
        part for part in path.split(os.sep)
        if part not in ('', '.', '..')
    )


def _matching_files(file_spec: FileSpec) -> list[tuple[str, str]]:
    '''
    returns pairs of (local path, target path) for all regular files matching the given spec.
    If the target ends with a slash, it denotes a directory, otherwise a file.
    '''
    paths = sorted(
        p for p in glob.glob(file_spec.pattern, recursive=file_spec.recursive)
        if os.path.isfile(p)
    )
    target = file_spec.target

    if not target.endswith('/'):
        if len(paths) > 1:
            raise ValueError(f'{target=} is not a directory, but {file_spec.pattern=} matched '
                f'{len(paths)} files')
        return [(p, target) for p in paths]

    def target_path(path: str):
        if file_spec.flat:
            return target + os.path.basename(path)
        return target + _relative_path(path)

    return [(p, target_path(p)) for p in paths]


def upload_binaries(
    api: ArtifactoryApi,
    build_info: BuildInfo,
    upload_spec: UploadSpec | dict | str,
    publish_info: bool=False,
    env: typing.Mapping[str, str]=None,
) -> BuildInfo:
    '''
    uploads binaries as specified by the upload spec and returns the build-info, extended by
    the uploaded artifacts. If publish_info is set, environment variables (w/o any
    containing passwords) are captured and the build-info is published.
    '''
    build_info = abi.with_artifacts(
        build_info=build_info,
        artifacts=api.upload_files(upload_spec=upload_spec),
    )

    if publish_info:
        build_info = abi.with_captured_env(build_info=build_info, env=env)
        api.publish_build_info(build_info=build_info)

    return build_info


def client(artifactory_cfg: ArtifactoryConfig) -> ArtifactoryApi:
    return ArtifactoryApi(
        api_routes=ArtifactoryApiRoutes(base_url=artifactory_cfg.base_url()),
        artifactory_cfg=artifactory_cfg,
    )
