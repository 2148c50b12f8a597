"""The MineSkin API client.

:class:`MineSkinClient` is the public entry point of the package.  It owns:

* two :class:`~mineskin.client.transport.Transport` instances -- one for
  generate requests (POST, long timeout) and one for lookups (GET, short
  timeout);
* two :class:`~mineskin.scheduler.JobQueue` channels in front of them, spaced
  by :attr:`ClientOptions.generate_interval` and
  :attr:`ClientOptions.get_interval`;
* three :class:`~mineskin.cache.AsyncLoadingCache` instances: skins by uuid,
  users by uuid and users by lower-cased name, the latter two linked with
  :func:`~mineskin.cache.cross_reference`.

Generated skins are written into the skin cache, so a ``get_skin`` right
after a generate call is answered locally.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from mineskin.cache import AsyncLoadingCache, cross_reference, normalize_name
from mineskin.client.response import parse_model
from mineskin.client.transport import RequestDescriptor, Transport
from mineskin.exceptions import InvalidUserError, MineSkinError, NotFoundError
from mineskin.models import ClientOptions, GeneratedSkin, GenerateOptions, Skin, User
from mineskin.scheduler import JobQueue, submit_with_retry
from mineskin.scheduler.queue import describe

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = ClientOptions.model_fields["user_agent"].default


class MineSkinClient:
    """Asynchronous, rate-limited client for the MineSkin API.

    Safe to construct outside an event loop; background tasks start on
    first use.  Use as an async context manager, or call :meth:`aclose`
    when done.

    Args:
        options: Client options.  Defaults to :class:`ClientOptions()`.
        transport: Optional httpx transport shared by both channels, e.g.
            :class:`httpx.MockTransport` in tests.

    Example::

        async with MineSkinClient(ClientOptions(user_agent="MyApp/1.0")) as client:
            skin = await client.generate_user("inventivetalent")
    """

    def __init__(
        self,
        options: Optional[ClientOptions] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._options = options or ClientOptions()
        opts = self._options
        if opts.user_agent == DEFAULT_USER_AGENT:
            logger.warning("No custom user-agent set for MineSkinClient")

        headers = {"User-Agent": opts.user_agent}
        if opts.api_key:
            headers["Authorization"] = f"Bearer {opts.api_key}"

        self._generate_transport = Transport(
            opts.api_base, headers, opts.generate_timeout, method="POST", transport=transport
        )
        self._get_transport = Transport(
            opts.api_base, headers, opts.get_timeout, method="GET", transport=transport
        )

        self._generate_queue: JobQueue[RequestDescriptor, httpx.Response] = JobQueue(
            self._generate_transport.issue, opts.generate_interval, name="generate"
        )
        self._get_queue: JobQueue[RequestDescriptor, httpx.Response] = JobQueue(
            self._get_transport.issue, opts.get_interval, name="get"
        )

        cache = opts.cache
        self._skin_by_uuid: AsyncLoadingCache[Skin] = AsyncLoadingCache(
            self._load_skin,
            expire_after_access=cache.skin_expire_after_access,
            expire_after_write=cache.skin_expire_after_write,
            expiration_interval=cache.expiration_interval,
            name="skin_by_uuid",
        )
        self._user_by_uuid: AsyncLoadingCache[User] = AsyncLoadingCache(
            self._load_user_by_uuid,
            expire_after_write=cache.user_expire_after_write,
            expiration_interval=cache.expiration_interval,
            name="user_by_uuid",
        )
        self._user_by_name: AsyncLoadingCache[User] = AsyncLoadingCache(
            self._load_user_by_name,
            expire_after_write=cache.user_expire_after_write,
            expiration_interval=cache.expiration_interval,
            name="user_by_name",
        )
        cross_reference(
            self._user_by_uuid,
            self._user_by_name,
            id_key=lambda user: user.uuid,
            name_key=lambda user: normalize_name(user.name) if user.name else None,
            is_valid=lambda user: user is not None and user.valid,
        )
        self._closed = False

    @property
    def options(self) -> ClientOptions:
        return self._options

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> MineSkinClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # Generate
    # ------------------------------------------------------------------ #

    async def generate_url(
        self, url: str, options: Optional[GenerateOptions] = None
    ) -> GeneratedSkin:
        """Generate a skin from an image URL."""
        body = {"url": url, **_params(options)}
        return await self._generate(RequestDescriptor(url="/generate/url", json=body))

    async def generate_upload(
        self, data: bytes, options: Optional[GenerateOptions] = None
    ) -> GeneratedSkin:
        """Generate a skin from PNG image bytes.

        The image is sent as a multipart ``file`` field named ``skin.png``;
        options are sent as form fields next to it.
        """
        form = {k: str(v) for k, v in _params(options).items()}
        descriptor = RequestDescriptor(
            url="/generate/upload",
            data=form,
            files={"file": ("skin.png", data, "image/png")},
        )
        return await self._generate(descriptor)

    async def generate_user(
        self, user: str, options: Optional[GenerateOptions] = None
    ) -> GeneratedSkin:
        """Generate a skin from a Minecraft user's current skin.

        Args:
            user: A uuid (anything longer than 16 characters) or a user name,
                which is resolved through :meth:`get_user_by_name`.
            options: Optional generate parameters.

        Raises:
            InvalidUserError: If *user* is a name that does not resolve to
                a uuid.
        """
        if len(user) > 16:
            uuid: Optional[str] = user
        else:
            resolved = await self.get_user_by_name(user)
            uuid = resolved.uuid if resolved is not None else None
        if not uuid:
            raise InvalidUserError(f"invalid user: {user}")

        body = {"uuid": uuid, **_params(options)}
        return await self._generate(RequestDescriptor(url="/generate/user", json=body))

    async def _generate(self, descriptor: RequestDescriptor) -> GeneratedSkin:
        response = await submit_with_retry(
            self._generate_queue, descriptor, self._options.max_tries
        )
        skin = parse_model(response, GeneratedSkin)
        if skin is None:
            raise MineSkinError(
                f"Empty response from {descriptor.url}", status_code=response.status_code
            )
        self._skin_by_uuid.put(skin.uuid, skin)
        return skin

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    async def get_skin(self, uuid: str) -> Optional[Skin]:
        """Return the skin with *uuid*, or ``None`` if MineSkin does not know it."""
        return await self._skin_by_uuid.get(uuid)

    async def get_user_by_uuid(self, uuid: str) -> Optional[User]:
        """Validate a user by uuid."""
        return await self._user_by_uuid.get(uuid)

    async def get_user_by_name(self, name: str) -> Optional[User]:
        """Validate a user by name (case-insensitive)."""
        return await self._user_by_name.get(normalize_name(name))

    async def _load_skin(self, uuid: str) -> Optional[Skin]:
        try:
            response = await self._get_queue.submit(
                RequestDescriptor(url=f"/get/uuid/{uuid}")
            )
        except NotFoundError:
            return None
        return parse_model(response, Skin)

    async def _load_user_by_uuid(self, uuid: str) -> Optional[User]:
        response = await self._get_queue.submit(
            RequestDescriptor(url=f"/validate/uuid/{uuid}")
        )
        return parse_model(response, User)

    async def _load_user_by_name(self, name: str) -> Optional[User]:
        response = await self._get_queue.submit(
            RequestDescriptor(url=f"/validate/name/{name}")
        )
        return parse_model(response, User)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def end(self) -> None:
        """Stop both request channels and all cache sweeps.

        Requests already sent complete; queued ones are rejected with
        :class:`~mineskin.exceptions.QueueClosedError`.  Idempotent.
        """
        self._get_queue.end()
        self._generate_queue.end()
        self._skin_by_uuid.end()
        self._user_by_name.end()
        self._user_by_uuid.end()

    shutdown = end

    async def aclose(self) -> None:
        """Call :meth:`end` and close the underlying HTTP connections.

        Requests already sent are awaited before the connections close.
        """
        self.end()
        if self._closed:
            return
        self._closed = True
        await self._generate_queue.wait_closed()
        await self._get_queue.wait_closed()
        await self._generate_transport.aclose()
        await self._get_transport.aclose()

    def stats(self) -> dict[str, Any]:
        """Return queue and cache statistics for diagnostics."""
        return {
            "queues": [describe(self._generate_queue), describe(self._get_queue)],
            "caches": [
                self._skin_by_uuid.stats(),
                self._user_by_uuid.stats(),
                self._user_by_name.stats(),
            ],
        }


def _params(options: Optional[GenerateOptions]) -> dict[str, Any]:
    return options.to_params() if options is not None else {}
