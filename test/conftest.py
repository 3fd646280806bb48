# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import json
import unittest.mock

import pytest
import requests

import artifactoryutil.client
import buildmetadata
import model.artifactory


def http_response(
    status_code: int=200,
    body: dict | str | None=None,
    url: str='https://artifactory.example.com/artifactory',
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if isinstance(body, dict):
        body = json.dumps(body)
    response._content = (body or '').encode('utf-8')
    return response


@pytest.fixture
def build_env() -> buildmetadata.BuildEnvironment:
    return buildmetadata.BuildEnvironment(
        gerrit_project='mcp/pipeline-library',
        gerrit_change_number='4242',
        gerrit_patchset_number='3',
        gerrit_change_id='I0123456789abcdef',
        gerrit_patchset_revision='deadbeef',
        job_name='build-images',
        build_number='17',
    )


@pytest.fixture
def artifactory_cfg() -> model.artifactory.ArtifactoryConfig:
    cfg = model.artifactory.ArtifactoryConfig(
        name='test',
        raw_dict={
            'base_url': 'https://artifactory.example.com/artifactory/',
            'credentials': {
                'username': 'ci-user',
                'password': 'secret',
            },
        },
    )
    cfg.validate()
    return cfg


@pytest.fixture
def session():
    session = unittest.mock.MagicMock(spec=requests.Session)
    session.get.return_value = http_response(body={})
    session.put.return_value = http_response()
    session.post.return_value = http_response()
    return session


@pytest.fixture
def artifactory_api(artifactory_cfg, session) -> artifactoryutil.client.ArtifactoryApi:
    api = artifactoryutil.client.client(artifactory_cfg=artifactory_cfg)
    api._session = session
    return api


@pytest.fixture
def mk_response():
    return http_response
