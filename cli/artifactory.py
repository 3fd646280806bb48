# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
artifact search, property management and promotion. Artifactory credentials are read from
the given cfg-file, or (if absent) from ARTIFACTORY_URL, ARTIFACTORY_LOGIN and
ARTIFACTORY_PASSWORD.
'''

import json
import sys

import artifactoryutil.buildinfo
import artifactoryutil.client
import artifactoryutil.model
import buildmetadata
import model.artifactory


def _client(
    cfg_file: str,
    cfg_name: str,
) -> artifactoryutil.client.ArtifactoryApi:
    if cfg_file:
        cfg = model.artifactory.find_config(cfg_file=cfg_file, name=cfg_name)
    else:
        cfg = model.artifactory.config_from_env()

    return artifactoryutil.client.client(artifactory_cfg=cfg)


def _properties(properties: list[str]) -> dict[str, str]:
    def split(prop: str):
        key, sep, value = prop.partition('=')
        if not sep:
            raise ValueError(f'{prop=} must be of form key=value')
        return key, value

    return dict(split(p) for p in properties or ())


def search(
    prop: [str],
    cfg_file: str=None,
    cfg_name: str='default',
):
    '''
    prints the URI of the (last) artifact carrying all given properties (key=value)
    '''
    api = _client(cfg_file=cfg_file, cfg_name=cfg_name)
    uri = api.uri_by_properties(properties=_properties(prop))
    if not uri:
        print('no artifact found', file=sys.stderr)
        sys.exit(1)
    print(uri)


def set_properties(
    artifact_url: str,
    prop: [str],
    recursive: bool=False,
    cfg_file: str=None,
    cfg_name: str='default',
):
    api = _client(cfg_file=cfg_file, cfg_name=cfg_name)
    api.set_properties(
        artifact_url=artifact_url,
        properties=_properties(prop),
        recursive=recursive,
    )


def get_properties(
    artifact_url: str,
    cfg_file: str=None,
    cfg_name: str='default',
):
    api = _client(cfg_file=cfg_file, cfg_name=cfg_name)
    print(json.dumps(api.properties_for_artifact(artifact_url=artifact_url), indent=2))


def promote_docker_image(
    source_repository: str,
    target_repository: str,
    docker_repository: str,
    tag: str,
    target_tag: str,
    copy: bool=False,
    cfg_file: str=None,
    cfg_name: str='default',
):
    api = _client(cfg_file=cfg_file, cfg_name=cfg_name)
    api.promote_docker_image(
        promotion=artifactoryutil.model.DockerPromotion(
            source_repository=source_repository,
            target_repository=target_repository,
            docker_repository=docker_repository,
            tag=tag,
            target_tag=target_tag,
            copy=copy,
        ),
    )


def upload_docker_image(
    registry: str,
    image: str,
    version: str,
    repository: str,
    cfg_file: str=None,
    cfg_name: str='default',
):
    api = _client(cfg_file=cfg_file, cfg_name=cfg_name)
    print(api.upload_docker_image(
        registry=registry,
        image=image,
        version=version,
        repository=repository,
        build_env=buildmetadata.BuildEnvironment.from_env(),
    ))


def upload_binaries(
    upload_spec: str,
    build_name: str=None,
    build_number: str=None,
    publish_info: bool=False,
    cfg_file: str=None,
    cfg_name: str='default',
):
    '''
    uploads files as specified by the given upload spec (path to a JSON file). Build name
    and number default to JOB_NAME and BUILD_NUMBER.
    '''
    build_env = buildmetadata.BuildEnvironment.from_env()
    with open(upload_spec) as f:
        spec = json.load(f)

    api = _client(cfg_file=cfg_file, cfg_name=cfg_name)
    build_info = artifactoryutil.client.upload_binaries(
        api=api,
        build_info=artifactoryutil.buildinfo.new_build_info(
            name=build_name or build_env.job_name,
            number=build_number or build_env.build_number,
        ),
        upload_spec=spec,
        publish_info=publish_info,
    )

    for artifact in build_info.artifacts:
        print(artifact.path)
