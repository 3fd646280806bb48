# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import datetime

import pytest

import buildmetadata as examinee


def test_build_environment_from_env():
    build_env = examinee.BuildEnvironment.from_env(env={
        'GERRIT_PROJECT': 'mcp/pipeline-library',
        'GERRIT_CHANGE_NUMBER': '4242',
        'GERRIT_CHANGE_ID': 'I0123',
        'JOB_NAME': 'build-images',
        'BUILD_NUMBER': '',
    })

    assert build_env.gerrit_project == 'mcp/pipeline-library'
    assert build_env.gerrit_change_number == '4242'
    assert build_env.gerrit_change_id == 'I0123'
    assert build_env.job_name == 'build-images'
    # absent or empty values
    assert build_env.gerrit_patchset_number == 'null'
    assert build_env.gerrit_patchset_revision == 'null'
    assert build_env.build_number == 'null'


def test_build_environment_defaults_to_os_environ(monkeypatch):
    monkeypatch.setenv('GERRIT_PROJECT', 'from-os-environ')

    assert examinee.BuildEnvironment.from_env().gerrit_project == 'from-os-environ'


def test_mandatory_build_properties(build_env):
    assert examinee.mandatory_build_properties(build_env) == [
        'gerritProject=mcp/pipeline-library',
        'gerritChangeNumber=4242',
        'gerritPatchsetNumber=3',
        'gerritChangeId=I0123456789abcdef',
        'gerritPatchsetRevision=deadbeef',
    ]


def test_dockerfile_labels(build_env):
    labels = examinee.dockerfile_labels(build_env, custom_properties=['team=ci'])

    assert labels == ' '.join((
        'com.mirantis.image-specs.gerritProject=mcp/pipeline-library',
        'com.mirantis.image-specs.gerritChangeNumber=4242',
        'com.mirantis.image-specs.gerritPatchsetNumber=3',
        'com.mirantis.image-specs.gerritChangeId=I0123456789abcdef',
        'com.mirantis.image-specs.gerritPatchsetRevision=deadbeef',
        'com.mirantis.image-specs.team=ci',
    ))


def test_set_dockerfile_labels(build_env, tmp_path):
    dockerfile = tmp_path / 'Dockerfile'
    dockerfile.write_text('FROM scratch\n')

    labels = examinee.set_dockerfile_labels(
        build_env=build_env,
        dockerfile_path=str(dockerfile),
    )

    assert dockerfile.read_text() == (
        'FROM scratch\n'
        '# Apply additional build metadata\n'
        f'LABEL {labels}\n'
    )
    assert labels == examinee.dockerfile_labels(build_env)


def test_set_dockerfile_labels_requires_existing_dockerfile(build_env, tmp_path):
    with pytest.raises(examinee.BuildMetadataError):
        examinee.set_dockerfile_labels(
            build_env=build_env,
            dockerfile_path=str(tmp_path / 'Dockerfile'),
        )


def test_binary_build_properties(build_env):
    props = examinee.binary_build_properties(build_env, ['arch=amd64'])

    assert props.split(';') == [
        'com.mirantis.gerritProject=mcp/pipeline-library',
        'com.mirantis.gerritChangeNumber=4242',
        'com.mirantis.gerritPatchsetNumber=3',
        'com.mirantis.gerritChangeId=I0123456789abcdef',
        'com.mirantis.gerritPatchsetRevision=deadbeef',
        'com.mirantis.arch=amd64',
    ]
    assert examinee.binary_build_properties(build_env, []) == \
        examinee.binary_build_properties(build_env)


def test_docker_image_properties(build_env):
    assert list(examinee.docker_image_properties(build_env, '1.2.3').items()) == [
        ('com.mirantis.build_name', 'build-images'),
        ('com.mirantis.build_id', '17'),
        ('com.mirantis.changeid', 'I0123456789abcdef'),
        ('com.mirantis.patchset_number', '3'),
        ('com.mirantis.target_tag', '1.2.3'),
    ]


def test_timestamp():
    now = datetime.datetime(2024, 2, 29, 23, 59, 1, tzinfo=datetime.timezone.utc)

    assert examinee.timestamp(now=now) == '20240229235901'
    assert examinee.timestamp(fmt='%Y-%m-%d', now=now) == '2024-02-29'

    # non-UTC times are converted
    cet = datetime.timezone(datetime.timedelta(hours=1))
    assert examinee.timestamp(now=now.astimezone(cet)) == '20240229235901'

    assert len(examinee.timestamp()) == len('yyyyMMddHHmmss')
