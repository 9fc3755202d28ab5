"""Named cloud contexts: one API token per context, one active context.

The registry document lives in ``cloud-contexts.json``. It is loaded fresh
for every operation, mutated, and written back in full before the
operation returns; nothing is cached between calls.

Token placement is decided once, when a context is created:

* keychain write succeeds -> the entry carries no token;
* keychain write fails    -> the token is stored inline in the entry, and
  any stale keychain entry for that name is removed.

A token therefore lives in exactly one place at any moment.
"""

import structlog

from hetzner_cli.enums import StoreDomain

from .backend import KeychainBackend
from .environment_backend import CLOUD_TOKEN_VAR, EnvironmentBackend
from .exceptions import NoCredentialsFoundError, ProfileNotFoundError
from .file_store import FileStore
from .keyring_backend import context_account
from .models import ContextEntry, ContextsDocument, ContextSummary, parse_document

log = structlog.get_logger(__name__)

NO_TOKEN_SUGGESTION = (
    "Use one of:\n"
    "  --token <token>                  Pass token directly\n"
    f"  {CLOUD_TOKEN_VAR}=<token>      Set environment variable\n"
    "  hetzner cloud context create     Configure a named context"
)
LIST_HINT = "Use 'hetzner cloud context list' to see available contexts."


class ContextRegistry:
    """Create, switch, delete and resolve named cloud contexts.

    Invariants maintained by every operation:
        - ``active`` is either None or the name of an existing context
        - the first context created becomes active; later ones never do
        - deleting the active context activates the first remaining one,
          or leaves no active context if none remain

    Example:
        >>> registry = ContextRegistry(EnvironmentBackend(), KeyringBackend(), FileStore(path))
        >>> registry.create("prod", "token-abc")
        >>> registry.active()
        'prod'
        >>> registry.resolve_token()
        'token-abc'
    """

    def __init__(
        self,
        environment: EnvironmentBackend,
        keychain: KeychainBackend,
        file_store: FileStore,
    ) -> None:
        self.environment = environment
        self.keychain = keychain
        self.file_store = file_store

    def _load(self) -> ContextsDocument:
        document = parse_document(ContextsDocument, self.file_store.load(StoreDomain.CLOUD_CONTEXTS))
        return document if document is not None else ContextsDocument()

    def _save(self, document: ContextsDocument) -> None:
        self.file_store.save(StoreDomain.CLOUD_CONTEXTS, document.to_document())

    def create(self, name: str, token: str) -> bool:
        """Create (or replace) a context.

        Args:
            name: Context name; case-sensitive, must not be empty
            token: Cloud API token; must not be empty

        Returns:
            True if the token went to the keychain, False if it was stored
            inline in the registry file

        Raises:
            ValueError: If name or token is empty
        """
        if not name:
            raise ValueError("Context name cannot be empty")
        if not token:
            raise ValueError("Token cannot be empty")

        document = self._load()
        account = context_account(name)

        stored_in_keychain = self.keychain.set(account, token)
        if stored_in_keychain:
            entry = ContextEntry(name=name)
        else:
            # An older keychain copy would otherwise shadow the inline token
            self.keychain.delete(account)
            entry = ContextEntry(name=name, token=token)
            log.info(
                "cloud_token_stored_in_plaintext",
                context=name,
                path=str(self.file_store.path_for(StoreDomain.CLOUD_CONTEXTS)),
            )

        document.profiles[name] = entry
        if document.active is None:
            document.active = name

        self._save(document)
        log.info("context_created", context=name, keychain=stored_in_keychain)
        return stored_in_keychain

    def use(self, name: str) -> None:
        """Make ``name`` the active context.

        Raises:
            ProfileNotFoundError: If the context does not exist
        """
        document = self._load()
        if name not in document.profiles:
            raise ProfileNotFoundError(name, suggestion=LIST_HINT)

        document.active = name
        self._save(document)
        log.info("context_activated", context=name)

    def delete(self, name: str) -> None:
        """Delete a context and its keychain entry.

        Raises:
            ProfileNotFoundError: If the context does not exist
        """
        document = self._load()
        if name not in document.profiles:
            raise ProfileNotFoundError(name, suggestion=LIST_HINT)

        self.keychain.delete(context_account(name))
        del document.profiles[name]

        if document.active == name:
            document.active = document.first_name()
            log.info("context_reassigned", deleted=name, active=document.active)

        self._save(document)
        log.info("context_deleted", context=name)

    def list(self) -> list[ContextSummary]:
        """Return every context in registry order, flagging the active one."""
        document = self._load()
        return [ContextSummary(name=name, active=name == document.active) for name in document.profiles]

    def active(self) -> str | None:
        """Return the active context name, if any."""
        return self._load().active

    def get(self, name: str) -> ContextEntry | None:
        return self._load().profiles.get(name)

    def resolve_token(self, override: str | None = None) -> str:
        """Resolve the Cloud API token for an invocation.

        Priority: ``override`` (``--token``), ``HETZNER_CLOUD_TOKEN``, then the
        active context (keychain first, inline token second).

        Args:
            override: Token given explicitly by the caller

        Returns:
            The token

        Raises:
            NoCredentialsFoundError: If no source yields a token
        """
        if override:
            return override

        env_token = self.environment.read_cloud_token()
        if env_token:
            return env_token

        document = self._load()
        if document.active is None:
            raise NoCredentialsFoundError("No cloud token found.", suggestion=NO_TOKEN_SUGGESTION)

        token = self.keychain.get(context_account(document.active))
        if token:
            log.debug("cloud_token_resolved", context=document.active, source="keychain")
            return token

        entry = document.profiles[document.active]
        if entry.token:
            log.debug("cloud_token_resolved", context=document.active, source="file")
            return entry.token

        raise NoCredentialsFoundError(
            f"No cloud token found for active context '{document.active}'.",
            suggestion=NO_TOKEN_SUGGESTION,
        )
