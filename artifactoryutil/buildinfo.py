# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import dataclasses
import datetime
import fnmatch
import os
import typing

from artifactoryutil.model import (
    BuildInfo,
    BuildInfoEnvFilter,
    UploadedArtifact,
)

BUILD_INFO_TIME_FORMAT = '%Y-%m-%dT%H:%M:%S.000+0000'


def new_build_info(
    name: str,
    number: str,
    started: datetime.datetime=None,
    module_id: str=None,
) -> BuildInfo:
    if started is None:
        started = datetime.datetime.now(tz=datetime.timezone.utc)

    return BuildInfo(
        name=name,
        number=str(number),
        started=started.astimezone(datetime.timezone.utc).strftime(BUILD_INFO_TIME_FORMAT),
        module_id=module_id,
    )


def filter_env(
    env: typing.Mapping[str, str],
    env_filter: BuildInfoEnvFilter=BuildInfoEnvFilter(),
) -> dict[str, str]:
    '''
    returns the subset of env whose names match any of the include-patterns and none of the
    exclude-patterns. Matching is case-sensitive (fnmatchcase) regardless of the platform.
    '''
    def included(name: str) -> bool:
        if not any(fnmatch.fnmatchcase(name, p) for p in env_filter.include_patterns):
            return False
        return not any(fnmatch.fnmatchcase(name, p) for p in env_filter.exclude_patterns)

    return {
        name: value for name, value in env.items() if included(name)
    }


def with_artifacts(
    build_info: BuildInfo,
    artifacts: typing.Iterable[UploadedArtifact],
) -> BuildInfo:
    return dataclasses.replace(
        build_info,
        artifacts=build_info.artifacts + tuple(artifacts),
    )


def with_captured_env(
    build_info: BuildInfo,
    env: typing.Mapping[str, str]=None,
    env_filter: BuildInfoEnvFilter=BuildInfoEnvFilter(),
) -> BuildInfo:
    if env is None:
        env = os.environ

    return dataclasses.replace(
        build_info,
        env=filter_env(env=env, env_filter=env_filter),
    )
