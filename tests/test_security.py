import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient

from app.exceptions import VerificationError
from app.security import (
    API_KEY_NAME,
    get_api_key,
    get_settings,
    sign_payload,
    verify_delivery,
    verify_signature,
)
from app.settings import Settings

BODY = b'{"ref": "refs/heads/main", "commits": []}'


def test_get_api_key_accepts_valid_key():
    result = get_api_key(api_key_header="secret", current_settings=Settings(BLOG_API_KEY="secret"))
    assert result == "secret"


def test_get_api_key_rejects_invalid_key():
    with pytest.raises(HTTPException) as exc:
        get_api_key(api_key_header="wrong", current_settings=Settings(BLOG_API_KEY="secret"))
    assert exc.value.status_code == 403


def test_get_api_key_rejects_missing_header():
    with pytest.raises(HTTPException):
        get_api_key(api_key_header=None, current_settings=Settings(BLOG_API_KEY="secret"))


def test_get_api_key_rejects_everything_when_unconfigured():
    with pytest.raises(HTTPException):
        get_api_key(api_key_header="", current_settings=Settings(BLOG_API_KEY=""))


def test_dependency_in_route_checks_key():
    app = FastAPI()
    app.dependency_overrides[get_settings] = lambda: Settings(BLOG_API_KEY="secret")

    @app.get("/secure")
    def secure(key=Depends(get_api_key)):
        return {"ok": True}

    client = TestClient(app)
    assert client.get("/secure", headers={API_KEY_NAME: "secret"}).json() == {"ok": True}
    assert client.get("/secure", headers={API_KEY_NAME: "wrong"}).status_code == 403


def test_sign_payload_matches_github_example():
    # sample delivery from GitHub's webhook validation docs
    signature = sign_payload("It's a Secret to Everybody", b"Hello, World!")
    assert signature == (
        "sha256=757107ea0eb2509fc211221cce984b8a37570b6d7586c22c46f4379c8b043e17"
    )


def test_verify_signature_accepts_matching_signature():
    assert verify_signature("s3cret", BODY, sign_payload("s3cret", BODY))


@pytest.mark.parametrize(
    "secret, header",
    [
        ("s3cret", None),
        ("s3cret", ""),
        ("s3cret", sign_payload("other", BODY)),
        ("s3cret", sign_payload("s3cret", BODY).replace("sha256=", "sha1=")),
        ("s3cret", "sha256=ünïcode"),
        ("", sign_payload("", BODY)),
    ],
)
def test_verify_signature_rejects(secret, header):
    assert verify_signature(secret, BODY, header) is False


def test_verify_signature_detects_modified_body():
    header = sign_payload("s3cret", BODY)
    assert not verify_signature("s3cret", BODY + b" ", header)


def test_verify_delivery_raises_on_mismatch():
    with pytest.raises(VerificationError):
        verify_delivery("s3cret", BODY, "sha256=00")
