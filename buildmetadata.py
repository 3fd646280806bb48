# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import datetime
import logging
import os
import typing

import optionutil

logger = logging.getLogger(__name__)

IMAGE_SPECS_NAMESPACE = 'com.mirantis.image-specs.'
BINARY_NAMESPACE = 'com.mirantis.'
DEFAULT_TIMESTAMP_FORMAT = '%Y%m%d%H%M%S'

# rendered for absent values, so labels always carry all mandatory keys
UNSET = 'null'


class BuildMetadataError(RuntimeError):
    pass


@dataclasses.dataclass(frozen=True, kw_only=True)
class BuildEnvironment:
    '''
    metadata about the change and the CI job a build was triggered for
    '''
    gerrit_project: str = UNSET
    gerrit_change_number: str = UNSET
    gerrit_patchset_number: str = UNSET
    gerrit_change_id: str = UNSET
    gerrit_patchset_revision: str = UNSET
    job_name: str = UNSET
    build_number: str = UNSET

    @staticmethod
    def from_env(env: typing.Mapping[str, str]=None) -> 'BuildEnvironment':
        if env is None:
            env = os.environ

        def value(name: str) -> str:
            return env.get(name) or UNSET

        return BuildEnvironment(
            gerrit_project=value('GERRIT_PROJECT'),
            gerrit_change_number=value('GERRIT_CHANGE_NUMBER'),
            gerrit_patchset_number=value('GERRIT_PATCHSET_NUMBER'),
            gerrit_change_id=value('GERRIT_CHANGE_ID'),
            gerrit_patchset_revision=value('GERRIT_PATCHSET_REVISION'),
            job_name=value('JOB_NAME'),
            build_number=value('BUILD_NUMBER'),
        )


def mandatory_build_properties(build_env: BuildEnvironment) -> list[str]:
    return [
        f'gerritProject={build_env.gerrit_project}',
        f'gerritChangeNumber={build_env.gerrit_change_number}',
        f'gerritPatchsetNumber={build_env.gerrit_patchset_number}',
        f'gerritChangeId={build_env.gerrit_change_id}',
        f'gerritPatchsetRevision={build_env.gerrit_patchset_revision}',
    ]


def dockerfile_labels(
    build_env: BuildEnvironment,
    custom_properties: typing.Sequence[str]=None,
) -> str:
    return optionutil.compose_options(
        mandatory=mandatory_build_properties(build_env),
        custom=custom_properties,
        key_prefix=IMAGE_SPECS_NAMESPACE,
        separator=' ',
    )


def set_dockerfile_labels(
    build_env: BuildEnvironment,
    dockerfile_path: str='./Dockerfile',
    custom_properties: typing.Sequence[str]=None,
) -> str:
    '''
    appends a `LABEL` directive with mandatory (and optional custom) build metadata to the
    given Dockerfile.

    @param custom_properties: additional properties in format ["prop1=value1", ..]
    @return: the label string that was added
    '''
    if not os.path.isfile(dockerfile_path):
        raise BuildMetadataError(
            f'Unable to add LABEL to Dockerfile, {dockerfile_path} does not exist'
        )

    logger.info(f'updating {dockerfile_path}')
    labels = dockerfile_labels(
        build_env=build_env,
        custom_properties=custom_properties,
    )

    with open(dockerfile_path, 'a') as f:
        f.write('# Apply additional build metadata\n')
        f.write(f'LABEL {labels}\n')

    return labels


def binary_build_properties(
    build_env: BuildEnvironment,
    custom_properties: typing.Sequence[str]=None,
) -> str:
    '''
    returns the string of mandatory (and optional custom) build properties to attach to
    binaries, e.g. `com.mirantis.gerritProject=foo;com.mirantis.gerritChangeNumber=42;..`
    '''
    return optionutil.compose_options(
        mandatory=mandatory_build_properties(build_env),
        custom=custom_properties or None,
        key_prefix=BINARY_NAMESPACE,
        separator=';',
    )


def docker_image_properties(
    build_env: BuildEnvironment,
    version: str,
) -> dict[str, str]:
    return {
        f'{BINARY_NAMESPACE}build_name': build_env.job_name,
        f'{BINARY_NAMESPACE}build_id': build_env.build_number,
        f'{BINARY_NAMESPACE}changeid': build_env.gerrit_change_id,
        f'{BINARY_NAMESPACE}patchset_number': build_env.gerrit_patchset_number,
        f'{BINARY_NAMESPACE}target_tag': version,
    }


def timestamp(
    fmt: str=DEFAULT_TIMESTAMP_FORMAT,
    now: datetime.datetime=None,
) -> str:
    if now is None:
        now = datetime.datetime.now(tz=datetime.timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(datetime.timezone.utc)

    return now.strftime(fmt)
