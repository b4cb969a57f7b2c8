"""Methods for the Users API.

:class:`Users` is a mixin: it holds no state and reaches the network only
through the verbs and auth-context accessors named by :class:`UsersHost`,
which :class:`~staffomatic.client.connection.Connection` provides.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional, Protocol, TypeVar, Union, runtime_checkable

from pydantic import BaseModel, ValidationError

from staffomatic.exceptions import ErrorKind, InvalidUsageError, StaffomaticError
from staffomatic.models import ClientConfig, Credentials, ListUsersOptions, UserUpdate
from staffomatic.output import debug
from staffomatic.user import User, UserRef

_M = TypeVar("_M", bound=BaseModel)


@runtime_checkable
class UsersHost(Protocol):
    """What the :class:`Users` mixin needs from the client it is mixed into."""

    @property
    def config(self) -> ClientConfig: ...

    @property
    def login(self) -> Optional[str]: ...

    @property
    def user_authenticated(self) -> bool: ...

    @property
    def client_id(self) -> Optional[str]: ...

    @property
    def client_secret(self) -> Optional[str]: ...

    @property
    def web_endpoint(self) -> str: ...

    def get(self, path: str, **kwargs: Any) -> Any: ...

    def post(self, path: str, **kwargs: Any) -> Any: ...

    def patch(self, path: str, **kwargs: Any) -> Any: ...

    def paginate(self, path: str, params: Optional[dict[str, Any]] = None) -> Iterable[Any]: ...


def _coerce(
    model: type[_M],
    options: Union[_M, Mapping[str, Any], None],
    extra: Mapping[str, Any],
) -> _M:
    """Build *model* from an instance, a mapping, keyword arguments, or a mix."""
    if isinstance(options, model) and not extra:
        return options
    data: dict[str, Any] = {}
    if isinstance(options, BaseModel):
        data.update(options.model_dump(exclude_unset=True))
    elif options is not None:
        data.update(options)
    data.update(extra)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidUsageError(f"Invalid {model.__name__}: {exc}") from exc


class Users:
    """Methods for the Users API."""

    def all_users(
        self,
        options: Union[ListUsersOptions, Mapping[str, Any], None] = None,
        **kwargs: Any,
    ) -> Iterable[dict[str, Any]]:
        """List all users, in the order they signed up.

        Args:
            options: A :class:`~staffomatic.models.ListUsersOptions` or an
                equivalent mapping.
            **kwargs: ``since`` (the integer id of the last user seen) and
                ``per_page``.

        Returns:
            A lazy, restartable iterable over every user on every page.

        Example::

            for user in client.all_users(since=100):
                print(user["id"])
        """
        opts = _coerce(ListUsersOptions, options, kwargs)
        return self.paginate("users", params=opts.to_params())

    list_users = all_users

    def user(self, user: UserRef = None, **kwargs: Any) -> Any:
        """Get a single user, or the authenticated user when *user* is ``None``.

        Passing the client's own login also fetches ``user``, but only
        while the client is user-authenticated; otherwise it fetches
        ``users/{login}``.

        Args:
            user: User id or login.
            **kwargs: Extra query parameters.

        Raises:
            NotFound: If the user does not exist.
            Unauthorized: If the credentials are rejected.
        """
        return self.get(self._user_path(user), params=kwargs or None)

    get_user = user

    def exchange_code_for_token(
        self,
        code: str,
        app_id: Optional[str] = None,
        app_secret: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Exchange an OAuth authorization code for an access token.

        The request carries only the application named in the body; the
        client's own credentials are not sent.

        Args:
            code: Authorization code returned to the redirect URI.
            app_id: Client id of the registered application. Defaults to the
                client's ``client_id``.
            app_secret: Client secret of the registered application. Defaults
                to the client's ``client_secret``.
            **kwargs: Extra body fields, e.g. ``redirect_uri`` or ``state``.

        Returns:
            The decoded token payload, e.g. ``{"access_token": "...", ...}``.
        """
        body = {
            **kwargs,
            "code": code,
            "client_id": app_id if app_id is not None else self.client_id,
            "client_secret": app_secret if app_secret is not None else self.client_secret,
        }
        return self.post(
            f"{self.web_endpoint}login/oauth/access_token",
            json_body=body,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            authenticate=False,
        )

    def validate_credentials(
        self,
        credentials: Union[Credentials, Mapping[str, Any], None] = None,
        **kwargs: Any,
    ) -> bool:
        """Check an email and password against the API.

        A separate client is built for the check, so this client's own
        credentials are left untouched.

        Args:
            credentials: A :class:`~staffomatic.models.Credentials` or an
                equivalent mapping.
            **kwargs: ``email`` and ``password``.

        Returns:
            ``True`` if the authenticated user can be fetched, ``False`` if
            the API answers unauthorized.

        Raises:
            StaffomaticError: Any failure other than unauthorized.
        """
        creds = _coerce(Credentials, credentials, kwargs)
        config = ClientConfig(
            api_endpoint=self.config.api_endpoint,
            web_endpoint=self.config.web_endpoint,
            user_agent=self.config.user_agent,
            request=self.config.request,
            email=creds.email,
            password=creds.password,
        )
        with self._spawn(config) as client:
            try:
                return client.user() is not None
            except StaffomaticError as exc:
                if exc.kind is not ErrorKind.UNAUTHORIZED:
                    raise
                debug(f"Credentials rejected for {creds.email}")
                return False

    def update_user(
        self,
        options: Union[UserUpdate, Mapping[str, Any], None] = None,
        **kwargs: Any,
    ) -> Any:
        """Update the authenticated user.

        Args:
            options: A :class:`~staffomatic.models.UserUpdate` or an
                equivalent mapping.
            **kwargs: Any of ``name``, ``email``, ``blog``, ``company``,
                ``location``, ``hireable``, ``bio``.

        Returns:
            The decoded updated user.

        Example::

            client.update_user(name="Erik", location="San Francisco", hireable=False)
        """
        update = _coerce(UserUpdate, options, kwargs)
        return self.patch("user", json_body=update.to_body())

    def _user_path(self, user: UserRef, path: str = "") -> str:
        """Build a path under *user*, using ``user`` for the authenticated login.

        ``_user_path("jane", "shifts")`` is ``user/shifts`` when ``jane`` is
        this client's authenticated login, and ``users/jane/shifts`` otherwise.
        """
        if user == self.login and self.user_authenticated:
            base = "user"
        else:
            base = User.path(user)
        return f"{base}/{path}" if path else base
