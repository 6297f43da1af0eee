"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client
    from shared.mail import MailSender
    from shared.storage import ObjectStorage
    from modules.auth.interfaces import IAuthService
    from modules.auth.tokens import TokenService
    from modules.users.interfaces import IUserService
    from modules.users.repository import UserRepository
    from modules.posts.interfaces import IPostService
    from modules.posts.repository import PostRepository


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._reset_state()

    def _reset_state(self) -> None:
        self._db: "Client | None" = None
        self._storage: "ObjectStorage | None" = None
        self._mailer: "MailSender | None" = None
        self._tokens: "TokenService | None" = None
        self._user_repository: "UserRepository | None" = None
        self._post_repository: "PostRepository | None" = None
        self._auth_service: "IAuthService | None" = None
        self._user_service: "IUserService | None" = None
        self._post_service: "IPostService | None" = None

    # -------------------------------------------------------------------------
    # Infrastructure
    # -------------------------------------------------------------------------

    @property
    def db(self) -> "Client":
        """Get the Supabase client."""
        if self._db is None:
            from shared.database import get_supabase_client
            self._db = get_supabase_client()
        return self._db

    @property
    def storage(self) -> "ObjectStorage":
        """Get the object storage for post files."""
        if self._storage is None:
            from shared.storage import ObjectStorage
            self._storage = ObjectStorage(self.db)
        return self._storage

    @property
    def mailer(self) -> "MailSender":
        if self._mailer is None:
            from shared.mail import MailSender
            self._mailer = MailSender()
        return self._mailer

    @property
    def tokens(self) -> "TokenService":
        """Get the token service."""
        if self._tokens is None:
            from modules.auth.tokens import TokenService
            self._tokens = TokenService()
        return self._tokens

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------

    @property
    def user_repository(self) -> "UserRepository":
        """Get the user repository instance."""
        if self._user_repository is None:
            from modules.users.repository import UserRepository
            self._user_repository = UserRepository(self.db)
        return self._user_repository

    @property
    def post_repository(self) -> "PostRepository":
        """Get the post repository instance."""
        if self._post_repository is None:
            from modules.posts.repository import PostRepository
            self._post_repository = PostRepository(self.db)
        return self._post_repository

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                users=self.user_repository,
                tokens=self.tokens,
                mailer=self.mailer,
            )
        return self._auth_service

    @property
    def users(self) -> "IUserService":
        """Get the user service instance."""
        if self._user_service is None:
            from modules.users.service import UserService
            self._user_service = UserService(
                repository=self.user_repository,
                post_repository=self.post_repository,
                storage=self.storage,
            )
        return self._user_service

    @property
    def posts(self) -> "IPostService":
        """Get the post service instance."""
        if self._post_service is None:
            from modules.posts.service import PostService
            self._post_service = PostService(
                repository=self.post_repository,
                users=self.user_repository,
                storage=self.storage,
            )
        return self._post_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._reset_state()


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_token_service() -> "TokenService":
    """FastAPI dependency for the token service."""
    return get_container().tokens


def get_user_repository() -> "UserRepository":
    """FastAPI dependency for the user repository."""
    return get_container().user_repository


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_user_service() -> "IUserService":
    """FastAPI dependency for user service."""
    return get_container().users


def get_post_service() -> "IPostService":
    """FastAPI dependency for post service."""
    return get_container().posts
