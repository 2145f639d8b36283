# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import pytest
from aws_s3_signers import AWSCredentials
from aws_s3_signers.credentials_resolvers import EnvironmentCredentialsSource


@pytest.mark.parametrize(
    "environ",
    [
        {"AWS_ACCESS_KEY_ID": "AK", "AWS_SECRET_ACCESS_KEY": "SK"},
        {"AWS_ACCESS_KEY": "AK", "AWS_SECRET_KEY": "SK"},
        {"AWS_ACCESS_KEY_ID": "AK", "AWS_SECRET_KEY": "SK"},
        {"AWS_ACCESS_KEY_ID": " ", "AWS_ACCESS_KEY": "AK", "AWS_SECRET_KEY": "SK"},
    ],
)
def test_resolves_keys(environ: dict[str, str]) -> None:
    assert EnvironmentCredentialsSource(environ)() == AWSCredentials(
        access_key_id="AK", secret_access_key="SK"
    )


def test_primary_variables_win() -> None:
    source = EnvironmentCredentialsSource(
        {
            "AWS_ACCESS_KEY_ID": "AK1",
            "AWS_SECRET_ACCESS_KEY": "SK1",
            "AWS_ACCESS_KEY": "AK2",
            "AWS_SECRET_KEY": "SK2",
        }
    )
    assert source() == AWSCredentials(access_key_id="AK1", secret_access_key="SK1")


def test_session_token_is_not_read() -> None:
    credentials = EnvironmentCredentialsSource(
        {
            "AWS_ACCESS_KEY_ID": "AK",
            "AWS_SECRET_ACCESS_KEY": "SK",
            "AWS_SESSION_TOKEN": "TOKEN",
        }
    )()
    assert credentials is not None
    assert credentials.session_token is None


@pytest.mark.parametrize(
    "environ",
    [{}, {"AWS_ACCESS_KEY_ID": "AK"}, {"AWS_SECRET_ACCESS_KEY": "SK"}],
)
def test_missing_keys(environ: dict[str, str]) -> None:
    assert EnvironmentCredentialsSource(environ)() is None


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AK")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "SK")
    assert EnvironmentCredentialsSource()() == AWSCredentials(
        access_key_id="AK", secret_access_key="SK"
    )
