# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import logging
import os

import git
import git.exc

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    pass


def _repo(repo: git.Repo | str | os.PathLike) -> git.Repo:
    if repo is None:
        raise ValueError(repo)
    if isinstance(repo, git.Repo):
        return repo

    try:
        return git.Repo(repo, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise GitError(f'not a git repository: {repo}') from e


def head_commit(repo: git.Repo | str | os.PathLike='.') -> str:
    '''
    returns the commit-digest of HEAD of the given repository (`git rev-parse HEAD`)
    '''
    repo = _repo(repo)
    try:
        return repo.head.commit.hexsha
    except ValueError as e:
        # raised by GitPython for repositories w/o any commits
        raise GitError(f'{repo.working_tree_dir} has no commits') from e


def describe(repo: git.Repo | str | os.PathLike='.') -> str:
    '''
    describes HEAD using the most recent tag reachable from it (`git describe --tags`)
    '''
    repo = _repo(repo)
    try:
        return repo.git.describe('--tags').strip()
    except git.exc.GitCommandError as e:
        raise GitError(
            f'git describe failed for {repo.working_tree_dir}: {str(e.stderr).strip()}'
        ) from e
