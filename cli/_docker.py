# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dockerutil


__cmd_name__ = 'docker'


def build_args(
    option: [str],
):
    '''
    prints `--build-arg` options for the given `key=value` options
    '''
    print(dockerutil.build_args(options=option))
