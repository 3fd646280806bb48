# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import gitutil


__cmd_name__ = 'git'


def commit(
    repo_dir: str='.',
):
    print(gitutil.head_commit(repo=repo_dir))


def describe(
    repo_dir: str='.',
):
    print(gitutil.describe(repo=repo_dir))
