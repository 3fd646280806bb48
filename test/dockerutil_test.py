# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import base64
import json
import os
import subprocess
import unittest.mock

import pytest

import dockerutil


def test_image_reference():
    assert dockerutil.image_reference('registry.example.com/', 'img', '1.0') == \
        'registry.example.com/img:1.0'


def test_build_args():
    assert dockerutil.build_args(['a=b', 'c=d']) == '--build-arg a=b --build-arg c=d'
    assert dockerutil.build_args([]) == ''


def test_mk_docker_cfg_dir(tmp_path):
    cfg_dir = str(tmp_path / 'docker-cfg')

    assert dockerutil.mk_docker_cfg_dir(cfg={'auths': {}}, cfg_dir=cfg_dir) == cfg_dir

    with open(os.path.join(cfg_dir, 'config.json')) as f:
        assert json.load(f) == {'auths': {}}

    with pytest.raises(RuntimeError):
        dockerutil.mk_docker_cfg_dir(cfg={}, cfg_dir=cfg_dir)


def test_docker_login_cfg(tmp_path):
    cfg_dir = dockerutil.docker_login_cfg(
        registry='registry.example.com',
        username='user',
        password='pass',
        cfg_dir=str(tmp_path),
    )

    with open(os.path.join(cfg_dir, 'config.json')) as f:
        cfg = json.load(f)

    auth = cfg['auths']['registry.example.com']['auth']
    assert base64.b64decode(auth).decode('utf-8') == 'user:pass'


def test_docker_push():
    with unittest.mock.patch('subprocess.run') as run:
        dockerutil.docker_push('registry.example.com/img:1.0', cfg_dir='/cfg')

    argv = run.call_args.args[0]
    assert argv == ('docker', '--config', '/cfg', 'push', 'registry.example.com/img:1.0')


def test_docker_push_failure():
    error = subprocess.CalledProcessError(
        returncode=1,
        cmd=['docker', 'push'],
        stderr='denied: requested access to the resource is denied',
    )
    with unittest.mock.patch('subprocess.run', side_effect=error):
        with pytest.raises(dockerutil.DockerError, match='denied'):
            dockerutil.docker_push('registry.example.com/img:1.0')
