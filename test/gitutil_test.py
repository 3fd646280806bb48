import git
import pytest

import gitutil


@pytest.fixture
def git_repo(tmpdir):
    repo = git.Repo.init(tmpdir)

    repo.index.commit('first commit')

    return repo


def test_head_commit(git_repo):
    assert gitutil.head_commit(git_repo) == git_repo.head.commit.hexsha
    assert gitutil.head_commit(git_repo.working_tree_dir) == git_repo.head.commit.hexsha

    commit = git_repo.index.commit('second commit')

    assert gitutil.head_commit(git_repo.working_tree_dir) == commit.hexsha


def test_head_commit_without_commits(tmpdir):
    git.Repo.init(tmpdir)

    with pytest.raises(gitutil.GitError):
        gitutil.head_commit(str(tmpdir))


def test_head_commit_outside_of_repository(tmpdir):
    with pytest.raises(gitutil.GitError):
        gitutil.head_commit(str(tmpdir.join('no-such-dir')))


def test_describe(git_repo):
    git_repo.create_tag('1.0.0')

    assert gitutil.describe(git_repo) == '1.0.0'

    commit = git_repo.index.commit('second commit')

    assert gitutil.describe(git_repo.working_tree_dir) == f'1.0.0-1-g{commit.hexsha[:7]}'


def test_describe_without_tags(git_repo):
    with pytest.raises(gitutil.GitError):
        gitutil.describe(git_repo)
