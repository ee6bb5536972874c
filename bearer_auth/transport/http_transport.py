"""
HTTP Transport - JSON endpoints for registration, login and protected content

Module: transport.http_transport
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - POST /registration, POST /authentication
  - GET /authorized_hello (bearer token required), GET /hello
  - bcrypt and signing run in the default executor

ARCHITECTURE:
HTTPTransport is a thin aiohttp layer over AuthenticationService and
AuthorizationGuard. Request bodies carry "Username"/"Password";
responses carry "Success" plus "Token" or "Message".

SECURITY NOTES:
- Login failures are one 401 regardless of cause
- Authorization failures are one 401 with "WWW-Authenticate: Bearer"
- Infrastructure errors are logged in full and answered with a bare 500
- Request bodies are capped (client_max_size)
"""

import asyncio
import json
import logging
from typing import Any, Optional, Tuple

from aiohttp import web

from ..core.auth_service import (
    AuthenticationService,
    AuthenticationFailedError,
    CredentialExistsError,
)
from ..core.config import HTTPConfig
from ..core.constants import (
    AUTHORIZATION_HEADER,
    BEARER_SCHEME,
    ROUTE_REGISTRATION,
    ROUTE_AUTHENTICATION,
    ROUTE_AUTHORIZED_HELLO,
    ROUTE_HELLO,
)
from ..persistence.credential_store import CredentialStoreError
from ..security.authentication.password_hasher import HashingError
from ..security.authentication.token_issuer import SigningError
from ..security.authorization_guard import AuthorizationGuard, UnauthorizedError


class BadRequestError(Exception):
    """Request body does not carry string Username and Password"""
    pass


class HTTPTransport:
    """
    aiohttp server exposing the authentication endpoints.

    Typical usage:
        transport = HTTPTransport(service, guard, HTTPConfig(port=8080))
        await transport.start()
        ...
        await transport.stop()
    """

    def __init__(
        self,
        service: AuthenticationService,
        guard: AuthorizationGuard,
        config: Optional[HTTPConfig] = None,
    ):
        self.logger = logging.getLogger("transport.http")
        self.service = service
        self.guard = guard
        self.config = config or HTTPConfig()
        self.runner: Optional[web.AppRunner] = None
        self.is_running = False

    def create_app(self) -> web.Application:
        """Application with all routes registered"""
        app = web.Application(client_max_size=self.config.max_body_size)
        app.router.add_post(ROUTE_REGISTRATION, self._handle_registration)
        app.router.add_post(ROUTE_AUTHENTICATION, self._handle_authentication)
        app.router.add_get(ROUTE_AUTHORIZED_HELLO, self._handle_authorized_hello)
        app.router.add_get(ROUTE_HELLO, self._handle_hello)
        return app

    async def start(self) -> None:
        """Start listening on config.host:config.port"""
        if self.is_running:
            self.logger.warning("HTTP transport already running")
            return

        self.runner = web.AppRunner(self.create_app())
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.config.host, self.config.port)
        try:
            await site.start()
        except OSError as e:
            self.logger.error(f"Server startup failed: {e}")
            await self.runner.cleanup()
            self.runner = None
            raise

        self.is_running = True
        self.logger.info(f"HTTP server started on {self.config.host}:{self.config.port}")

    async def stop(self) -> None:
        """Stop the server and release the socket"""
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
        self.is_running = False
        self.logger.info("HTTP server stopped")

    async def serve_forever(self) -> None:
        """Start and block until cancelled"""
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _handle_registration(self, request: web.Request) -> web.Response:
        failure = {"Success": False}
        try:
            username, password = await self._read_credentials(request)
        except BadRequestError as e:
            self.logger.warning(f"Bad registration request: {e}")
            return web.json_response(failure, status=400)

        try:
            await self._run_blocking(self.service.register, username, password)
        except CredentialExistsError:
            return web.json_response(failure, status=409)
        except ValueError as e:
            self.logger.warning(f"Registration rejected: {e}")
            return web.json_response(failure, status=400)
        except (HashingError, CredentialStoreError) as e:
            self.logger.error(f"Registration failed for {username}: {e}", exc_info=True)
            return web.json_response(failure, status=500)

        return web.json_response({"Success": True})

    async def _handle_authentication(self, request: web.Request) -> web.Response:
        failure = {"Success": False, "Token": ""}
        try:
            username, password = await self._read_credentials(request)
        except BadRequestError as e:
            self.logger.warning(f"Bad authentication request: {e}")
            return web.json_response(failure, status=400)

        try:
            issued = await self._run_blocking(self.service.login, username, password)
        except AuthenticationFailedError:
            return web.json_response(failure, status=401)
        except ValueError as e:
            self.logger.warning(f"Authentication rejected: {e}")
            return web.json_response(failure, status=400)
        except (HashingError, SigningError, CredentialStoreError) as e:
            self.logger.error(f"Authentication failed for {username}: {e}", exc_info=True)
            return web.json_response(failure, status=500)

        return web.json_response({"Success": True, "Token": issued.token})

    async def _handle_authorized_hello(self, request: web.Request) -> web.Response:
        try:
            claims = self.guard.authorize(request.headers.get(AUTHORIZATION_HEADER))
        except UnauthorizedError:
            return web.json_response(
                {"Success": False, "Message": ""},
                status=401,
                headers={"WWW-Authenticate": BEARER_SCHEME},
            )

        return web.json_response({"Success": True, "Message": f"Hello {claims.subject}"})

    async def _handle_hello(self, request: web.Request) -> web.Response:
        return web.json_response({"Success": True, "Message": "Hello World"})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _read_credentials(request: web.Request) -> Tuple[str, str]:
        try:
            body: Any = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise BadRequestError(f"Invalid JSON body: {e}") from e

        if not isinstance(body, dict):
            raise BadRequestError("Body must be a JSON object")

        username = body.get("Username")
        password = body.get("Password")
        if not isinstance(username, str) or not isinstance(password, str):
            raise BadRequestError("Username and Password must be strings")
        return username, password

    @staticmethod
    async def _run_blocking(func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)
