"""Document store speaking Turtle over HTTP.

Documents are fetched with ``GET`` and replaced with ``PUT``, both using the
``text/turtle`` media type. Parsing and serialisation go through rdflib.
Authentication is delegated to an `httpx.Auth` instance (for example a
bearer token or DPoP flow implemented by the application). A preconfigured
`httpx.AsyncClient` can be injected instead, which is also how tests plug in
`httpx.MockTransport`.
"""

from typing import Optional
from urllib.parse import urldefrag

import httpx
from rdflib import Graph
from rdflib.plugins.parsers.notation3 import BadSyntax

from podrepo.document import Document
from podrepo.errors import TransportError
from podrepo.logging import setup_logging
from podrepo.storage.interfaces import DocumentStoreInterface

logger = setup_logging()

TURTLE = "text/turtle"
DEFAULT_TIMEOUT = 10.0


class HttpDocumentStore(DocumentStoreInterface):
    """Fetch and save documents on an HTTP document server (e.g. a Solid pod).

    Args:
        auth: Optional httpx authentication applied to every request.
        timeout: Request timeout in seconds, used when no client is given.
        client: Optional client to reuse. When omitted, a short-lived client
            is opened for each request.
    """

    def __init__(
        self,
        auth: Optional[httpx.Auth] = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.auth = auth
        self.timeout = timeout
        self._client = client

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self.auth is not None:
            kwargs["auth"] = self.auth
        try:
            if self._client is not None:
                response = await self._client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(url, f"{method} failed: {e}") from e

        if response.is_error:
            raise TransportError(url, f"{method} returned {response.status_code}", status_code=response.status_code)
        return response

    async def fetch_document(self, url: str) -> Document:
        url = urldefrag(url)[0]
        logger.debug(f"GET {url}")
        response = await self._request("GET", url, headers={"Accept": TURTLE})

        graph = Graph()
        try:
            graph.parse(data=response.text, format="turtle", publicID=url)
        except (BadSyntax, ValueError) as e:
            raise TransportError(url, f"invalid turtle: {e}", status_code=response.status_code) from e

        return Document.from_graph(graph, url=url)

    async def _put(self, url: str, document: Document, headers: dict[str, str]) -> Document:
        url = urldefrag(url)[0]
        saved = document.with_url(url).resolved()
        body = saved.to_graph().serialize(format="turtle")
        logger.debug(f"PUT {url} ({len(saved)} statements)")
        await self._request("PUT", url, content=body.encode("utf-8"), headers={"Content-Type": TURTLE, **headers})
        return saved

    async def save_document(self, url: str, document: Document) -> Document:
        return await self._put(url, document, {})

    async def create_document(self, url: str, document: Document) -> Document:
        # The server answers 412 when a document already exists at url.
        return await self._put(url, document, {"If-None-Match": "*"})
