# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import pytest

import artifactoryutil.model as examinee


def test_property_search_result():
    result = examinee.PropertySearchResult.from_dict({
        'results': [{'uri': 'a'}, {'uri': 'b'}],
    })

    assert result.results == (
        examinee.SearchResultEntry(uri='a'),
        examinee.SearchResultEntry(uri='b'),
    )
    assert result.last_uri() == 'b'

    assert examinee.PropertySearchResult.from_dict({'results': None}).last_uri() is None

    with pytest.raises(examinee.ArtifactoryError):
        examinee.PropertySearchResult.from_dict(['not', 'a', 'dict'])


def test_upload_spec():
    spec = examinee.UploadSpec.from_dict({
        'files': [
            {'pattern': 'out/*.deb', 'target': 'debs/', 'flat': 'true'},
            {'pattern': 'out/*.rpm', 'target': 'rpms/', 'props': 'a=b', 'recursive': False},
        ],
    })

    first, second = spec.files
    assert first.flat is True
    assert first.recursive is True
    assert first.props is None
    assert second.flat is False
    assert second.recursive is False
    assert second.props == 'a=b'


def test_upload_spec_requires_pattern_and_target():
    with pytest.raises(ValueError):
        examinee.UploadSpec.from_dict({'files': [{'pattern': 'out/*'}]})
