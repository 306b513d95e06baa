import json
from typing import Optional

import httpx
from rich.console import Console
from rich.text import Text


class DebugPrinter:
    """Print requests and responses to a rich console.

    JSON bodies are pretty printed; everything else is printed as text.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(stderr=True)

    def _print_headers(self, prefix: str, headers: httpx.Headers) -> None:
        for key, value in headers.multi_items():
            self._console.print(Text(f"{prefix} {key}: {value}", style="dim"))

    def _print_body(self, content: Optional[bytes], content_type: str) -> None:
        if content is None:
            self._console.print(Text("<streaming body>", style="italic"))
            return
        if not content:
            return

        text = content.decode("utf-8", errors="replace")
        if "json" in content_type:
            try:
                self._console.print_json(data=json.loads(text))
                return
            except ValueError:
                pass
        self._console.print(Text(text))

    def print(self, request: httpx.Request, response: httpx.Response) -> None:
        """Print both sides of an exchange.

        The response body must already be read, see ``httpx.Response.read``.
        """
        self._console.print(Text(f"> {request.method} {request.url}", style="bold cyan"))
        self._print_headers(">", request.headers)
        try:
            request_body: Optional[bytes] = request.content
        except httpx.RequestNotRead:
            request_body = None
        self._print_body(request_body, request.headers.get("content-type", ""))

        self._console.print(
            Text(
                f"< {response.http_version} {response.status_code} {response.reason_phrase}",
                style="bold green" if response.is_success else "bold red",
            )
        )
        self._print_headers("<", response.headers)
        self._print_body(response.content, response.headers.get("content-type", ""))
