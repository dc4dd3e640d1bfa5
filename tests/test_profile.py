import pytest

from sso_oauth import LoginPayload, NormalizedProfile, ParseError, parse_user_return


def test_unwraps_mediawiki_userinfo_envelope():
    data = {"batchcomplete": "", "query": {"userinfo": {"id": 42, "name": "Alice", "email": "a@x.com"}}}
    profile = parse_user_return(data)
    assert profile == NormalizedProfile(id="42", display_name="Alice", emails=("a@x.com",))
    assert profile.is_admin is False


def test_uses_payload_directly_without_envelope():
    profile = parse_user_return({"id": "w123", "name": "alice", "email": "a@x.com"})
    assert profile.id == "w123"
    assert profile.display_name == "alice"
    assert profile.emails == ("a@x.com",)


@pytest.mark.parametrize(
    "data",
    [
        {"name": "alice", "email": "a@x.com"},
        {"query": {"userinfo": {"name": "alice", "email": "a@x.com"}}},
        {"id": "w123", "name": "alice"},
        {"id": "w123", "name": "alice", "email": ""},
        ["not", "an", "object"],
        "garbage",
        None,
    ],
)
def test_malformed_payload_raises_parse_error(data):
    with pytest.raises(ParseError):
        parse_user_return(data)


def test_login_payload_from_profile():
    profile = NormalizedProfile(id="w123", display_name="alice", emails=("a@x.com", "b@x.com"), is_admin=True)
    assert profile.with_provider("wiki").provider == "wiki"
    assert profile.to_login_payload() == LoginPayload(
        oauth_id="w123", handle="alice", email="a@x.com", is_admin=True
    )
