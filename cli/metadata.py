# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
build metadata (read from the CI job's environment)
'''

import buildmetadata


def dockerfile_labels(
    dockerfile: str='./Dockerfile',
    custom_property: [str]=None,
):
    '''
    appends a LABEL directive with build metadata to the given Dockerfile
    '''
    print(buildmetadata.set_dockerfile_labels(
        build_env=buildmetadata.BuildEnvironment.from_env(),
        dockerfile_path=dockerfile,
        custom_properties=custom_property,
    ))


def binary_properties(
    custom_property: [str]=None,
):
    print(buildmetadata.binary_build_properties(
        build_env=buildmetadata.BuildEnvironment.from_env(),
        custom_properties=custom_property,
    ))


def timestamp(
    fmt: str=buildmetadata.DEFAULT_TIMESTAMP_FORMAT,
):
    print(buildmetadata.timestamp(fmt=fmt))
