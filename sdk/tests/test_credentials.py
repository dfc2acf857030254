"""Tests for the credential store and its backing stores"""
import json

from cafeconsole.credentials import TOKEN_KEY, USER_KEY, CredentialStore
from cafeconsole.models import SessionScope
from cafeconsole.storage import FileStore, MemoryStore


def _put(store, token, user):
    store.set(TOKEN_KEY, token)
    store.set(USER_KEY, user if isinstance(user, str) else json.dumps(user))


OWNER = {"id": "adm_o", "full_name": "Olive Owner", "email": "o@cafe.test", "role": "owner", "status": "active"}
STAFF = {"id": "adm_s", "full_name": "Sam Staff", "email": "s@cafe.test", "role": "staff", "status": "active"}


def test_empty_stores_resolve_to_nothing(credentials):
    assert credentials.resolve() is None
    assert credentials.resolve_pair() == (None, None)


def test_ephemeral_only(credentials, ephemeral):
    _put(ephemeral, "tok-e", STAFF)

    session = credentials.resolve()
    assert session.token == "tok-e"
    assert session.user.id == "adm_s"
    assert session.scope is SessionScope.EPHEMERAL


def test_persistent_only(credentials, persistent):
    _put(persistent, "tok-p", OWNER)

    token, user = credentials.resolve_pair()
    assert token == "tok-p"
    assert user.role == "owner"
    assert credentials.resolve().scope is SessionScope.PERSISTENT


def test_ephemeral_wins_over_persistent(credentials, persistent, ephemeral):
    """Test that the most recent tab login takes precedence"""
    _put(persistent, "tok-p", OWNER)
    _put(ephemeral, "tok-e", STAFF)

    token, user = credentials.resolve_pair()
    assert token == "tok-e"
    assert user.id == "adm_s"


def test_empty_ephemeral_user_falls_back(credentials, persistent, ephemeral):
    _put(persistent, "tok-p", OWNER)
    _put(ephemeral, "tok-e", {})

    assert credentials.resolve_pair()[0] == "tok-p"


def test_blank_ephemeral_fields_fall_back(credentials, persistent, ephemeral):
    _put(persistent, "tok-p", OWNER)
    _put(ephemeral, "tok-e", {"id": "", "role": None})

    assert credentials.resolve_pair()[0] == "tok-p"


def test_malformed_json_resolves_to_nothing(credentials, persistent, ephemeral):
    """Test that corrupt stored data is never an error"""
    _put(ephemeral, "tok-e", "{not json")
    _put(persistent, "tok-p", "[1, 2, 3]")

    assert credentials.resolve_pair() == (None, None)


def test_malformed_ephemeral_falls_back_to_persistent(credentials, persistent, ephemeral):
    _put(ephemeral, "tok-e", "{not json")
    _put(persistent, "tok-p", OWNER)

    assert credentials.resolve_pair()[0] == "tok-p"


def test_user_without_token_is_no_session(credentials, ephemeral):
    ephemeral.set(USER_KEY, json.dumps(STAFF))
    assert credentials.resolve() is None


def test_unknown_role_survives_parsing(credentials, ephemeral):
    _put(ephemeral, "tok-e", {**STAFF, "role": "barista"})

    session = credentials.resolve()
    assert session.user.role == "barista"
    assert session.role is None


def test_save_wipes_other_scope(credentials, persistent, ephemeral, account):
    _put(ephemeral, "tok-e", STAFF)

    credentials.save("tok-p", account("owner"), SessionScope.PERSISTENT)

    assert ephemeral.get(TOKEN_KEY) is None
    assert ephemeral.get(USER_KEY) is None
    assert credentials.resolve().scope is SessionScope.PERSISTENT

    credentials.save("tok-e2", account("staff"), SessionScope.EPHEMERAL)
    assert persistent.get(TOKEN_KEY) is None
    assert credentials.resolve_pair()[0] == "tok-e2"


def test_clear_removes_both_and_is_idempotent(credentials, persistent, ephemeral):
    _put(persistent, "tok-p", OWNER)
    _put(ephemeral, "tok-e", STAFF)

    credentials.clear()
    credentials.clear()

    assert credentials.resolve_pair() == (None, None)
    for store in (persistent, ephemeral):
        assert store.get(TOKEN_KEY) is None
        assert store.get(USER_KEY) is None


def test_refresh_user_updates_active_scope(credentials, persistent, account):
    credentials.save("tok-p", account("staff"), SessionScope.PERSISTENT)

    credentials.refresh_user(account("manager", id="adm_staff"))

    assert credentials.resolve().user.role == "manager"
    assert credentials.resolve().scope is SessionScope.PERSISTENT


def test_refresh_user_without_session(credentials, account):
    assert credentials.refresh_user(account("staff")) is None
    assert credentials.resolve() is None


def test_peek_claims(credentials, account, make_token):
    user = account("owner")
    credentials.save(make_token(user.id, "owner"), user, SessionScope.EPHEMERAL)

    claims = credentials.peek_claims()
    assert claims.sub == user.id
    assert claims.role == "owner"
    assert claims.expires_at is not None
    assert claims.reconcile(user)
    assert not claims.reconcile(account("staff", id=user.id))


def test_peek_claims_malformed_token(credentials, account):
    credentials.save("not-a-jwt", account("owner"), SessionScope.EPHEMERAL)

    assert credentials.peek_claims() is None
    assert credentials.resolve_pair()[0] == "not-a-jwt"


# ---------------------------------------------------------------------------
# Backing stores
# ---------------------------------------------------------------------------

def test_memory_store():
    store = MemoryStore({"a": "1"})
    assert store.get("a") == "1"
    store.set("b", "2")
    store.remove("a")
    store.remove("missing")
    assert store.get("a") is None
    assert store.get("b") == "2"


def test_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "session.json"
    FileStore(path).set(TOKEN_KEY, "tok")

    assert FileStore(path).get(TOKEN_KEY) == "tok"
    assert not path.with_suffix(".json.tmp").exists()


def test_file_store_missing_file(tmp_path):
    store = FileStore(tmp_path / "absent.json")
    assert store.get(TOKEN_KEY) is None
    store.remove(TOKEN_KEY)


def test_file_store_corrupt_file_reads_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{{{ garbage", encoding="utf-8")

    store = FileStore(path)
    assert store.get(TOKEN_KEY) is None

    store.set(TOKEN_KEY, "tok")
    assert store.get(TOKEN_KEY) == "tok"


def test_file_store_invalid_utf8_reads_empty(tmp_path):
    """Test that undecodable bytes degrade to no session"""
    path = tmp_path / "session.json"
    path.write_bytes(b'{"token": "\xff\xfe broken"}')

    store = FileStore(path)
    assert store.get(TOKEN_KEY) is None
    assert CredentialStore(persistent=store, ephemeral=MemoryStore()).resolve() is None

    store.set(TOKEN_KEY, "tok")
    assert store.get(TOKEN_KEY) == "tok"


def test_credential_store_over_file(tmp_path, account):
    path = tmp_path / "session.json"
    first = CredentialStore(persistent=FileStore(path), ephemeral=MemoryStore())
    first.save("tok-p", account("owner"), SessionScope.PERSISTENT)

    # A new process: fresh ephemeral store, same file
    second = CredentialStore(persistent=FileStore(path), ephemeral=MemoryStore())
    token, user = second.resolve_pair()
    assert token == "tok-p"
    assert user.role == "owner"
