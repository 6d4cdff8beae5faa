from __future__ import annotations

from pathlib import Path
import sys

import pytest
from botocore.exceptions import ClientError

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from owl.errors import DelegateError, DispatchError, Stage
from owl.message import Message, Params
from owl.providers.base import Provider
import owl.providers.ses as ses_module
import owl.sender as sender_module


class FakeSESClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.requests: list[dict] = []

    def send_email(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"MessageId": "0100-abc"}


def _provider(client: FakeSESClient, configs: list | None = None) -> ses_module.SESProvider:
    def factory(cfg):
        if configs is not None:
            configs.append(cfg)
        return client

    return ses_module.SESProvider(client_factory=factory)


MESSAGE = Message(from_="a@x.com", to=["b@y.com", "c@z.com"], subject="Hi", body="<b>hello</b>")
PARAMS = Params(provider=Provider.AWS_SES, id="AKIA123", password="s3cret")


def test_plain_text_send():
    client = FakeSESClient()

    message_id = _provider(client).send_message(MESSAGE, PARAMS)

    assert message_id == "0100-abc"
    (request,) = client.requests
    assert request["Source"] == "a@x.com"
    assert request["Destination"] == {"ToAddresses": ["b@y.com"]}
    assert request["Message"]["Subject"]["Data"] == "Hi"
    assert request["Message"]["Body"] == {"Text": {"Data": "<b>hello</b>", "Charset": "UTF-8"}}


def test_html_send_uses_body_for_both_parts():
    client = FakeSESClient()
    message = Message(from_="a@x.com", to=["b@y.com"], subject="Hi", body="<b>hello</b>", html=True)

    _provider(client).send(message, PARAMS)

    body = client.requests[0]["Message"]["Body"]
    assert body["Html"]["Data"] == "<b>hello</b>"
    assert body["Text"]["Data"] == "<b>hello</b>"


def test_client_error_becomes_delegate_error():
    error = ClientError(
        {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified."}},
        "SendEmail",
    )
    provider = _provider(FakeSESClient(error))

    with pytest.raises(DelegateError) as excinfo:
        provider.send(MESSAGE, PARAMS)

    assert excinfo.value.stage is Stage.SES_SEND
    assert excinfo.value.cause is error


def test_dispatcher_wraps_delegate_error_but_not_success():
    failing = sender_module.Dispatcher(
        {Provider.AWS_SES: _provider(FakeSESClient(ClientError({"Error": {}}, "SendEmail")))}
    )
    working = sender_module.Dispatcher({Provider.AWS_SES: _provider(FakeSESClient())})

    with pytest.raises(DispatchError) as excinfo:
        failing.send(MESSAGE, PARAMS)
    assert isinstance(excinfo.value.cause, DelegateError)

    assert working.send(MESSAGE, PARAMS) is None


def test_explicit_credentials_are_used(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "from-env")
    configs: list = []

    _provider(FakeSESClient(), configs).send(
        MESSAGE, Params(provider="aws-ses", id="AKIA123", password="s3cret", server="https://ses.local")
    )

    (cfg,) = configs
    assert cfg.access_key == "AKIA123"
    assert cfg.secret_key == "s3cret"
    assert cfg.endpoint == "https://ses.local"


@pytest.mark.parametrize(
    "params",
    [
        Params(provider=Provider.AWS_SES),
        Params(provider=Provider.AWS_SES, id="AKIA123"),
        Params(provider=Provider.AWS_SES, password="s3cret"),
    ],
)
def test_missing_credentials_fall_back_to_environment(monkeypatch, params):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "env-key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "env-secret")
    monkeypatch.setenv("AWS_SES_ENDPOINT", "https://email.eu-west-1.amazonaws.com")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")

    cfg = ses_module.resolve_ses_config(params)

    assert cfg == ses_module.SESConfig(
        region="eu-west-1",
        endpoint="https://email.eu-west-1.amazonaws.com",
        access_key="env-key",
        secret_key="env-secret",
    )


def test_environment_without_keys_leaves_them_to_boto3(monkeypatch):
    for name in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SES_ENDPOINT"):
        monkeypatch.delenv(name, raising=False)

    cfg = ses_module.ses_config_from_env()

    assert cfg.access_key is None
    assert cfg.secret_key is None
    assert cfg.endpoint is None


def test_config_repr_hides_secret():
    cfg = ses_module.SESConfig(region="us-east-1", access_key="AKIA123", secret_key="s3cret")

    assert "s3cret" not in repr(cfg)


def test_explicit_credentials_read_region_at_call_time(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "ap-southeast-2")

    cfg = ses_module.resolve_ses_config(PARAMS)

    assert cfg.region == "ap-southeast-2"
    assert cfg.access_key == "AKIA123"


def test_explicit_credentials_default_region(monkeypatch):
    monkeypatch.delenv("AWS_REGION", raising=False)

    assert ses_module.resolve_ses_config(PARAMS).region == ses_module.config.SES_REGION
