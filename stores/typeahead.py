"""
Typeahead search widget controller.

Holds the widget state (query, results, active result, visibility) and talks
to the search endpoint over httpx. The browser asset
``stores/static/stores/js/typeAhead.js`` follows the same rules:

- an empty input hides the panel and sends no request
- a new keystroke cancels the request still in flight
- a response for anything but the latest keystroke is dropped
- ArrowUp/ArrowDown move the active result, wrapping at both ends
- Enter opens the active result; with no active result it does nothing
- a failed search is logged and the panel keeps what it last showed

Usage:
    widget = TypeaheadWidget("http://localhost:8000/api/v1/search")
    await widget.on_input("piz")
    widget.on_keydown("ArrowDown")
    url = widget.on_keydown("Enter")
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

import httpx
from django.conf import settings
from django.urls import reverse
from django.utils.html import format_html, format_html_join

logger = logging.getLogger(__name__)

KEY_UP = 'ArrowUp'
KEY_DOWN = 'ArrowDown'
KEY_ENTER = 'Enter'

RESULT_CLASS = 'search__result'
ACTIVE_CLASS = 'search__result--active'

SEARCH_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError)


@dataclass(frozen=True)
class SearchResult:
    name: str
    slug: str

    @property
    def url(self) -> str:
        return reverse('stores:detail', kwargs={'slug': self.slug})


@dataclass(frozen=True)
class TypeaheadState:
    query: str = ''
    results: Tuple[SearchResult, ...] = ()
    results_for: Optional[str] = None  # query the current results answer
    active_index: Optional[int] = None
    visible: bool = False
    loading: bool = False


def move_active(state: TypeaheadState, step: int) -> TypeaheadState:
    """Move the active result by ``step``, wrapping around the ends."""
    count = len(state.results)
    if not count:
        return state
    if state.active_index is None:
        index = 0 if step > 0 else count - 1
    else:
        index = (state.active_index + step) % count
    return replace(state, active_index=index)


def active_url(state: TypeaheadState) -> Optional[str]:
    index = state.active_index
    if index is None or not 0 <= index < len(state.results):
        return None
    return state.results[index].url


def render_results(state: TypeaheadState) -> str:
    """Render the results panel body. All values are HTML-escaped."""
    if state.results_for is None:
        return ''
    if not state.results:
        return format_html(
            '<div class="{}">There were no results for {}</div>',
            RESULT_CLASS,
            state.results_for,
        )
    return format_html_join(
        '',
        '<a href="{}" class="{}"><strong>{}</strong></a>',
        (
            (
                result.url,
                f'{RESULT_CLASS} {ACTIVE_CLASS}' if index == state.active_index else RESULT_CLASS,
                result.name,
            )
            for index, result in enumerate(state.results)
        ),
    )


class TypeaheadWidget:
    """Incremental store search bound to one search input."""

    def __init__(
        self,
        search_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        navigate: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            search_url: Search endpoint, called as ``GET search_url?q=<text>``.
            client: httpx client to use; one is created lazily if omitted.
            timeout: Per-request timeout in seconds (default TYPEAHEAD_TIMEOUT).
            navigate: Called with the result URL when Enter opens a result.
        """
        self.search_url = search_url
        self.timeout = timeout if timeout is not None else settings.TYPEAHEAD_TIMEOUT
        self.navigate = navigate
        self.state = TypeaheadState()
        self._client = client
        self._owns_client = client is None
        self._seq = 0
        self._inflight: Optional[asyncio.Task] = None

    @property
    def panel_html(self) -> str:
        return render_results(self.state)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self):
        self._cancel_inflight()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _cancel_inflight(self):
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    async def _fetch(self, query: str) -> Tuple[SearchResult, ...]:
        response = await self._get_client().get(
            self.search_url, params={'q': query}, timeout=self.timeout,
        )
        response.raise_for_status()
        return tuple(
            SearchResult(name=str(item['name']), slug=str(item['slug']))
            for item in response.json()
        )

    async def on_input(self, value: str) -> TypeaheadState:
        """Handle a change of the search input and return the resulting state."""
        self._cancel_inflight()
        self._seq += 1
        seq = self._seq

        if not value:
            self.state = TypeaheadState()
            return self.state

        self.state = replace(self.state, query=value, visible=True, loading=True)
        task = asyncio.ensure_future(self._fetch(value))
        self._inflight = task
        try:
            results = await task
        except asyncio.CancelledError:
            if seq == self._seq:
                raise
            logger.debug(f"Typeahead search for '{value}' superseded")
            return self.state
        except SEARCH_ERRORS as exc:
            logger.warning(f"Typeahead search for '{value}' failed: {exc}")
            if seq == self._seq:
                self.state = replace(self.state, loading=False)
            return self.state
        finally:
            if self._inflight is task:
                self._inflight = None

        if seq != self._seq:
            logger.debug(f"Dropping stale typeahead response for '{value}'")
            return self.state

        self.state = replace(
            self.state,
            results=results,
            results_for=value,
            active_index=None,
            loading=False,
        )
        return self.state

    def on_keydown(self, key: str) -> Optional[str]:
        """
        Handle a key press in the search input.

        Returns the URL navigated to when Enter opens a result, else None.
        """
        if not self.state.visible:
            return None

        if key == KEY_DOWN:
            self.state = move_active(self.state, 1)
        elif key == KEY_UP:
            self.state = move_active(self.state, -1)
        elif key == KEY_ENTER:
            url = active_url(self.state)
            if url is not None and self.navigate is not None:
                self.navigate(url)
            return url
        return None
