from brandhub.utils.token_crypto import (
    TOKEN_PREFIX,
    build_token_string,
    generate_token,
    hash_secret,
    parse_token,
    verify_secret,
)


def test_generate_token_round_trips_through_parse():
    token_id, secret, token = generate_token()
    assert token.startswith(TOKEN_PREFIX)
    parsed = parse_token(token)
    assert parsed is not None
    assert parsed.token_id == token_id
    assert parsed.secret == secret


def test_parse_token_keeps_underscores_in_secret():
    parsed = parse_token(build_token_string("abc123", "se_cr_et"))
    assert parsed.token_id == "abc123"
    assert parsed.secret == "se_cr_et"


def test_parse_token_rejects_bad_formats():
    assert parse_token("") is None
    assert parse_token("other_prefix_abc_def") is None
    assert parse_token(f"{TOKEN_PREFIX}_secret") is None
    assert parse_token(f"{TOKEN_PREFIX}abc_") is None


def test_hash_and_verify_secret():
    encoded = hash_secret("hunter22")
    assert encoded != "hunter22"
    assert verify_secret("hunter22", encoded) is True
    assert verify_secret("wrong", encoded) is False
    assert verify_secret("hunter22", "not-a-hash") is False
    assert verify_secret("", encoded) is False
