"""
Module: tests/unit/test_config_loader.py

What:
    Validate the configuration loader: YAML and JSON ingestion, discovery
    precedence, caching, limit validation, and encryption key loading.

Why:
    The configured limits become the contract's initial limits at deploy time.
    The loader must refuse documents whose limits fall outside the ranges the
    contract accepts, and fail loudly when no configuration exists.

How:
    Write payloads to temporary files, point the loader at them, and assert on
    the resulting models or raised exceptions.

Invariants & Safety Rules:
    - Runtime cache is cleared around each test by the root autouse fixture.
"""

import json

import pytest

from emailbox.config.loader import (
    RuntimeConfigError,
    get_runtime_config,
    load_runtime_config,
    parse_runtime_config,
    read_encryption_key,
    reset_runtime_config,
)
from emailbox.core.address import Address


def test_canned_config_is_loaded_from_environment():
    runtime = get_runtime_config()
    assert runtime.admin_address() == Address.from_name("owner")
    assert runtime.limits.max_preview_size == 100
    assert runtime.limits.max_content_size == 5242880
    assert runtime.logging.component == "emailbox-tests"


def test_load_runtime_config_from_yaml(tmp_path, monkeypatch):
    config_path = tmp_path / "emailbox.yaml"
    config_path.write_text(
        """
version: 1
admin: alice
state:
  path: /var/lib/emailbox/state.db
  pragmas:
    journal_mode: WAL
limits:
  max_preview_size: 256
"""
    )
    monkeypatch.setenv("EMAILBOX_CONFIG_PATH", str(config_path))
    reset_runtime_config()
    runtime = get_runtime_config()
    assert runtime.admin == "alice"
    assert runtime.state.path == "/var/lib/emailbox/state.db"
    assert runtime.state.pragmas == {"journal_mode": "WAL"}
    assert runtime.limits.max_preview_size == 256
    assert runtime.limits.max_content_size == 5242880
    assert runtime.state.encryption_key_path is None


def test_load_runtime_config_from_json(tmp_path):
    """JSON is a YAML subset, so a JSON document loads the same way."""

    config_path = tmp_path / "emailbox.json"
    admin = Address.from_name("bob").hex()
    config_path.write_text(json.dumps({"version": 1, "admin": admin, "limits": {"max_content_size": 1}}))
    runtime = load_runtime_config(config_path)
    assert runtime.admin_address() == Address.from_name("bob")
    assert runtime.limits.max_content_size == 1


def test_explicit_path_wins_and_is_cached(tmp_path):
    first = tmp_path / "first.yaml"
    first.write_text("admin: first\n")
    second = tmp_path / "second.yaml"
    second.write_text("admin: second\n")

    assert load_runtime_config(first).admin == "first"
    assert load_runtime_config().admin == "first"
    assert load_runtime_config(second).admin == "second"
    second.write_text("admin: changed\n")
    assert load_runtime_config(second).admin == "second"
    assert load_runtime_config(second, reload=True).admin == "changed"


@pytest.mark.parametrize(
    "document",
    [
        "admin: owner\nlimits:\n  max_preview_size: 49\n",
        "admin: owner\nlimits:\n  max_preview_size: 512001\n",
        "admin: owner\nlimits:\n  max_content_size: 0\n",
        "admin: owner\nlimits:\n  max_content_size: 5242881\n",
        "admin: owner\nunknown: 1\n",
        "admin: owner\nversion: 2\n",
        "admin: a-name-that-is-much-longer-than-32-bytes\n",
        "limits: {}\n",
        "- just\n- a list\n",
        "admin: [unclosed\n",
    ],
)
def test_invalid_documents_raise(document):
    with pytest.raises(RuntimeConfigError):
        parse_runtime_config(document)


def test_missing_config_raises(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("EMAILBOX_CONFIG_PATH", str(tmp_path / "nope.yaml"))
    reset_runtime_config()
    with pytest.raises(RuntimeConfigError, match="Unable to locate"):
        load_runtime_config()


def test_read_encryption_key(tmp_path):
    key_file = tmp_path / "state.key"
    key_file.write_text("s3cret\n")
    runtime = parse_runtime_config(f"admin: owner\nstate:\n  encryption_key_path: {key_file}\n")
    assert read_encryption_key(runtime) == "s3cret"

    key_file.write_text("  \n")
    with pytest.raises(RuntimeConfigError, match="empty"):
        read_encryption_key(runtime)

    missing = parse_runtime_config(f"admin: owner\nstate:\n  encryption_key_path: {tmp_path / 'gone'}\n")
    with pytest.raises(RuntimeConfigError):
        read_encryption_key(missing)


def test_no_encryption_key_by_default():
    assert read_encryption_key(parse_runtime_config("admin: owner\n")) is None


def test_admin_may_be_a_hex_address():
    admin = Address(bytes(range(32)))
    runtime = parse_runtime_config(f'admin: "{admin.hex()}"\n')
    assert runtime.admin_address() == admin
