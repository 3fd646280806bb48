# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import datetime

import artifactoryutil.buildinfo as examinee
import artifactoryutil.model as am


def test_new_build_info():
    started = datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)

    build_info = examinee.new_build_info(name='job', number=3, started=started)

    assert build_info.number == '3'
    assert build_info.started == '2024-01-02T03:04:05.000+0000'
    assert build_info.as_dict()['modules'] == [{'id': 'job', 'artifacts': []}]
    assert 'properties' not in build_info.as_dict()


def test_filter_env():
    env = {
        'JOB_NAME': 'job',
        'ARTIFACTORY_PASSWORD': 'secret',
        'db_password_file': '/secret',
        'Password': 'kept (matching is case-sensitive)',
    }

    assert examinee.filter_env(env) == {
        'JOB_NAME': 'job',
        'Password': 'kept (matching is case-sensitive)',
    }

    only_gerrit = am.BuildInfoEnvFilter(include_patterns=('GERRIT_*',), exclude_patterns=())
    assert examinee.filter_env({'GERRIT_PROJECT': 'p', 'JOB_NAME': 'j'}, only_gerrit) == {
        'GERRIT_PROJECT': 'p',
    }


def test_with_artifacts_and_env_do_not_modify_build_info():
    build_info = examinee.new_build_info(name='job', number='1')
    artifact = am.UploadedArtifact(
        name='a.tar.gz',
        path='repo/a.tar.gz',
        sha1='1' * 40,
        sha256='2' * 64,
        md5='3' * 32,
        type='gz',
    )

    with_artifacts = examinee.with_artifacts(build_info, [artifact])
    with_env = examinee.with_captured_env(with_artifacts, env={'JOB_NAME': 'job'})

    assert build_info.artifacts == ()
    assert with_artifacts.artifacts == (artifact,)
    assert with_artifacts.env == {}
    assert with_env.env == {'JOB_NAME': 'job'}
    assert with_env.as_dict()['properties'] == {'buildInfo.env.JOB_NAME': 'job'}
    assert with_env.as_dict()['modules'][0]['artifacts'] == [{
        'type': 'gz',
        'sha1': '1' * 40,
        'sha256': '2' * 64,
        'md5': '3' * 32,
        'name': 'a.tar.gz',
        'path': 'repo/a.tar.gz',
    }]
