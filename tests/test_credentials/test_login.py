"""Tests for the interactive login and migration flow."""

import json

import click
import pytest

from hetzner_cli.credentials import CANCELLED, CredentialSet, prompt_login, require_credentials
from hetzner_cli.credentials.keyring_backend import ROBOT_ACCOUNT
from hetzner_cli.enums import StoreDomain

MIGRATE = "Migrate existing credentials to secure keychain storage?"
SAVE_KEYCHAIN = "Save credentials to secure keychain?"


@pytest.fixture
def file_credentials(file_store):
    file_store.save(StoreDomain.ROBOT, {"user": "old-user", "password": "old-pass"})


class TestMigration:
    """Test migrating config-file credentials into the keychain."""

    def test_migration_moves_credentials(self, resolver, keychain, file_store, file_credentials, make_prompter):
        prompter = make_prompter(confirms=[True])

        result = prompt_login(resolver, prompter)

        assert result == CredentialSet(user="old-user", password="old-pass")
        assert json.loads(keychain.entries[ROBOT_ACCOUNT]) == {"user": "old-user", "password": "old-pass"}
        assert file_store.load(StoreDomain.ROBOT) == {}
        assert prompter.asked == [MIGRATE]
        assert "Credentials migrated to keychain." in prompter.output

    def test_failed_migration_keeps_file(self, resolver, keychain, file_store, file_credentials, make_prompter):
        """Test a refused keychain write leaves the file and continues to the prompts."""
        keychain.fail_set = True
        prompter = make_prompter(texts=["new-user"], secrets=["new-pass"], confirms=[True, True])

        result = prompt_login(resolver, prompter)

        assert result == CredentialSet(user="new-user", password="new-pass")
        assert file_store.load(StoreDomain.ROBOT) == {"user": "new-user", "password": "new-pass"}
        assert "Could not write to the keychain; keeping the config file." in prompter.output
        assert "Credentials saved to config file." in prompter.output

    def test_declined_migration_continues_to_prompts(self, resolver, keychain, file_store, file_credentials, make_prompter):
        prompter = make_prompter(texts=["new-user"], secrets=["new-pass"], confirms=[False, True])

        result = prompt_login(resolver, prompter)

        assert result.user == "new-user"
        assert json.loads(keychain.entries[ROBOT_ACCOUNT])["user"] == "new-user"
        assert file_store.load(StoreDomain.ROBOT) == {"user": "old-user", "password": "old-pass"}

    def test_no_migration_offer_without_keychain(self, resolver, keychain, file_credentials, make_prompter):
        keychain.usable = False
        prompter = make_prompter(texts=["u"], secrets=["p"], confirms=[False])

        prompt_login(resolver, prompter)

        assert MIGRATE not in prompter.asked

    def test_no_migration_offer_without_file(self, resolver, make_prompter):
        prompter = make_prompter(texts=["u"], secrets=["p"], confirms=[False])

        prompt_login(resolver, prompter)

        assert prompter.asked == ["Web service username", "Web service password", SAVE_KEYCHAIN]


class TestLoginPrompts:
    """Test the credential prompts and save step."""

    def test_saves_to_keychain(self, resolver, keychain, file_store, make_prompter):
        prompter = make_prompter(texts=["alice"], secrets=["secret"], confirms=[True])

        result = prompt_login(resolver, prompter)

        assert result == CredentialSet(user="alice", password="secret")
        assert json.loads(keychain.entries[ROBOT_ACCOUNT]) == {"user": "alice", "password": "secret"}
        assert not file_store.path_for(StoreDomain.ROBOT).exists()
        assert "Credentials saved to keychain." in prompter.output

    def test_saves_to_file_without_keychain(self, resolver, keychain, file_store, make_prompter):
        keychain.usable = False
        prompter = make_prompter(texts=["alice"], secrets=["secret"], confirms=[True])

        prompt_login(resolver, prompter)

        assert prompter.asked[-1] == f"Save credentials to {resolver.config_path}?"
        assert file_store.load(StoreDomain.ROBOT) == {"user": "alice", "password": "secret"}
        assert not keychain.called("set")

    def test_falls_back_to_file_when_keychain_write_fails(self, resolver, keychain, file_store, make_prompter):
        keychain.fail_set = True
        prompter = make_prompter(texts=["alice"], secrets=["secret"], confirms=[True])

        prompt_login(resolver, prompter)

        assert file_store.load(StoreDomain.ROBOT) == {"user": "alice", "password": "secret"}
        assert "Credentials saved to config file." in prompter.output

    def test_declining_save_persists_nothing(self, resolver, keychain, file_store, make_prompter):
        prompter = make_prompter(texts=["alice"], secrets=["secret"], confirms=[False])

        result = prompt_login(resolver, prompter)

        assert result == CredentialSet(user="alice", password="secret")
        assert keychain.entries == {}
        assert not file_store.path_for(StoreDomain.ROBOT).exists()

    def test_empty_answers_are_asked_again(self, resolver, make_prompter):
        prompter = make_prompter(texts=["", "alice"], secrets=["", "", "secret"], confirms=[False])

        result = prompt_login(resolver, prompter)

        assert result == CredentialSet(user="alice", password="secret")
        assert prompter.output.count("Username is required") == 1
        assert prompter.output.count("Password is required") == 2

    def test_banner_shown(self, resolver, make_prompter):
        prompter = make_prompter(texts=["u"], secrets=["p"], confirms=[False])

        prompt_login(resolver, prompter)

        assert any("robot.hetzner.com" in line for line in prompter.output)


class TestCancellation:
    """Test aborting prompts."""

    def test_abort_at_username(self, resolver, make_prompter, abort):
        prompter = make_prompter(texts=[abort])

        assert prompt_login(resolver, prompter) is CANCELLED

    def test_abort_at_password_persists_nothing(self, resolver, keychain, file_store, make_prompter, abort):
        prompter = make_prompter(texts=["alice"], secrets=[abort])

        assert prompt_login(resolver, prompter) is CANCELLED
        assert keychain.entries == {}
        assert not file_store.path_for(StoreDomain.ROBOT).exists()

    def test_abort_at_migration_confirm(self, resolver, file_store, file_credentials, make_prompter, abort):
        prompter = make_prompter(confirms=[abort])

        assert prompt_login(resolver, prompter) is CANCELLED
        assert file_store.load(StoreDomain.ROBOT) == {"user": "old-user", "password": "old-pass"}

    def test_abort_at_save_confirm(self, resolver, keychain, make_prompter):
        prompter = make_prompter(texts=["alice"], secrets=["secret"], confirms=[click.Abort()])

        assert prompt_login(resolver, prompter) is CANCELLED
        assert keychain.entries == {}


class TestRequireCredentials:
    """Test resolution with interactive fallback."""

    def test_uses_stored_credentials_without_prompting(self, resolver, env, make_prompter):
        env["HETZNER_ROBOT_USER"] = "env-user"
        env["HETZNER_ROBOT_PASSWORD"] = "env-pass"
        prompter = make_prompter()

        result = require_credentials(resolver, prompter)

        assert result == CredentialSet(user="env-user", password="env-pass")
        assert prompter.asked == []

    def test_override_without_prompting(self, resolver, make_prompter):
        prompter = make_prompter()
        override = CredentialSet(user="flag-user", password="flag-pass")

        assert require_credentials(resolver, prompter, override) == override

    def test_prompts_when_nothing_stored(self, resolver, make_prompter):
        prompter = make_prompter(texts=["alice"], secrets=["secret"], confirms=[False])

        assert require_credentials(resolver, prompter) == CredentialSet(user="alice", password="secret")

    def test_propagates_cancellation(self, resolver, make_prompter, abort):
        prompter = make_prompter(texts=[abort])

        assert require_credentials(resolver, prompter) is CANCELLED
