"""Pytest configuration and shared fixtures."""

from pathlib import Path

import click
import pytest
import structlog

from hetzner_cli.config.settings import CliSettings
from hetzner_cli.credentials import (
    ContextRegistry,
    CredentialResolver,
    CredentialServices,
    EnvironmentBackend,
    FileStore,
    build_credential_services,
)

MANAGED_ENV_VARS = (
    "HETZNER_ROBOT_USER",
    "HETZNER_ROBOT_PASSWORD",
    "HETZNER_CLOUD_TOKEN",
    "HETZNER_CLI_CONFIG_DIR",
    "HETZNER_CLI_KEYCHAIN_SERVICE",
    "HETZNER_CLI_LOG_LEVEL",
)


class FakeKeychain:
    """In-memory keychain implementing the KeychainBackend protocol.

    ``installed=False`` simulates a missing keyring package, ``usable=False`` a
    locked keychain; ``fail_set`` makes writes fail while reads still work.
    Every call is recorded in ``calls``.
    """

    name = "fake"

    def __init__(self, usable: bool = True, fail_set: bool = False, installed: bool = True) -> None:
        self.entries: dict[str, str] = {}
        self.installed = installed
        self.usable = usable and installed
        self.fail_set = fail_set
        self.calls: list[tuple[str, ...]] = []

    @property
    def available(self) -> bool:
        return self.installed

    def probe(self) -> bool:
        self.calls.append(("probe",))
        return self.usable

    def get(self, account: str) -> str | None:
        self.calls.append(("get", account))
        if not self.usable:
            return None
        return self.entries.get(account)

    def set(self, account: str, value: str) -> bool:
        self.calls.append(("set", account))
        if not self.usable or self.fail_set or not value:
            return False
        self.entries[account] = value
        return True

    def delete(self, account: str) -> None:
        self.calls.append(("delete", account))
        if self.usable:
            self.entries.pop(account, None)

    def called(self, operation: str) -> bool:
        return any(call[0] == operation for call in self.calls)


class ScriptedPrompter:
    """Prompter that replays canned answers.

    An answer that is an exception instance is raised instead of returned,
    e.g. ``click.Abort()`` to simulate Ctrl-C.
    """

    def __init__(self, texts=(), secrets=(), confirms=()) -> None:
        self.texts = list(texts)
        self.secrets = list(secrets)
        self.confirms = list(confirms)
        self.asked: list[str] = []
        self.output: list[str] = []

    def _answer(self, queue: list, message: str):
        self.asked.append(message)
        if not queue:
            raise AssertionError(f"Unexpected prompt: {message}")
        answer = queue.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def text(self, message: str) -> str:
        return self._answer(self.texts, message)

    def secret(self, message: str) -> str:
        return self._answer(self.secrets, message)

    def confirm(self, message: str, default: bool = True) -> bool:
        return self._answer(self.confirms, message)

    def echo(self, message: str = "") -> None:
        self.output.append(message)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove credential variables inherited from the developer's shell."""
    for var in MANAGED_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Config directory that does not exist yet."""
    return tmp_path / "hetzner-cli"


@pytest.fixture
def file_store(config_dir: Path) -> FileStore:
    return FileStore(config_dir)


@pytest.fixture
def keychain() -> FakeKeychain:
    return FakeKeychain()


@pytest.fixture
def env() -> dict[str, str]:
    """Mutable environment mapping read by the environment backend."""
    return {}


@pytest.fixture
def environment(env: dict[str, str]) -> EnvironmentBackend:
    return EnvironmentBackend(env)


@pytest.fixture
def resolver(environment, keychain, file_store) -> CredentialResolver:
    return CredentialResolver(environment, keychain, file_store)


@pytest.fixture
def registry(environment, keychain, file_store) -> ContextRegistry:
    return ContextRegistry(environment, keychain, file_store)


@pytest.fixture
def services(config_dir, keychain, environment) -> CredentialServices:
    settings = CliSettings(config_dir=config_dir)
    return build_credential_services(settings, keychain=keychain, environment=environment)


@pytest.fixture
def make_prompter():
    """Factory for ScriptedPrompter instances."""
    return ScriptedPrompter


@pytest.fixture
def abort() -> click.Abort:
    """Answer that simulates the user aborting a prompt."""
    return click.Abort()
