"""
Live Search Controller

Headless model of the search-as-you-type dropdown: debounces input, fetches
matches, keeps the rendered list and the keyboard highlight.

Every input bumps a sequence number and each fetch is tagged with the number
current when it started. A response whose tag is no longer current is
dropped, so a slow answer to an old query never replaces newer results.
"""

import logging
import threading
from enum import Enum
from urllib.parse import urlencode

from ecobuddy.client.http import ClientError

logger = logging.getLogger(__name__)

DEBOUNCE_DELAY = 0.3
MIN_QUERY_LENGTH = 1
ERROR_MESSAGE = 'Error loading results'
EMPTY_MESSAGE = 'No results found'


class SearchState(str, Enum):
    IDLE = 'idle'
    DEBOUNCING = 'debouncing'
    FETCHING = 'fetching'
    RENDERED = 'rendered'
    ERROR = 'error'


def selection_url(item):
    """Where choosing a result navigates to."""
    return '/dashboard?' + urlencode({'search': item.get('title', '')})


class LiveSearch:
    def __init__(self, fetch, on_select=None, delay=DEBOUNCE_DELAY, min_length=MIN_QUERY_LENGTH,
                 timer_factory=threading.Timer):
        """
        Args:
            fetch: callable(query, category, town) returning a list of facility dicts
            on_select: called with (item, url) when a result is chosen
            timer_factory: callable(delay, fn) returning an object with start()/cancel()
        """
        self.fetch = fetch
        self.on_select = on_select
        self.delay = delay
        self.min_length = min_length
        self.timer_factory = timer_factory

        self.state = SearchState.IDLE
        self.query = ''
        self.category = ''
        self.town = ''
        self.results = []
        self.message = None
        self.highlighted = -1

        self._seq = 0
        self._timer = None
        self._lock = threading.RLock()

    @property
    def sequence(self):
        return self._seq

    def set_filters(self, category='', town=''):
        self.category = category or ''
        self.town = town or ''

    def on_input(self, text):
        """Handle a keystroke; (re)starts the debounce timer."""
        query = (text or '').strip()
        with self._lock:
            self._cancel_timer()
            if len(query) < self.min_length:
                self._reset()
                return
            self._seq += 1
            self.query = query
            self.state = SearchState.DEBOUNCING
            self._timer = self.timer_factory(self.delay, self._fire)
            self._timer.start()

    def _fire(self):
        with self._lock:
            if self.state != SearchState.DEBOUNCING:
                return
            self._timer = None
            self.state = SearchState.FETCHING
            seq = self._seq
            query, category, town = self.query, self.category, self.town

        try:
            results = self.fetch(query, category, town)
        except (ClientError, ValueError) as e:
            logger.debug('Search for %r failed: %s', query, e)
            self.handle_failure(seq, e)
            return
        except Exception as e:
            logger.exception('Unexpected error searching for %r', query)
            self.handle_failure(seq, e)
            return
        self.handle_response(seq, results)

    def handle_response(self, seq, results):
        """Render ``results`` if ``seq`` is still current. Returns whether it was used."""
        with self._lock:
            if seq != self._seq or self.state != SearchState.FETCHING:
                logger.debug('Dropping stale search response %s (current %s)', seq, self._seq)
                return False
            if not isinstance(results, list):
                self._show_error()
                return True
            self.results = list(results)
            self.highlighted = -1
            self.message = None if self.results else EMPTY_MESSAGE
            self.state = SearchState.RENDERED
            return True

    def handle_failure(self, seq, error=None):
        with self._lock:
            if seq != self._seq or self.state != SearchState.FETCHING:
                return False
            self._show_error()
            return True

    def on_key(self, key):
        """ArrowDown/ArrowUp move the highlight circularly, Enter selects.

        Returns the selection URL for Enter, otherwise the highlighted index.
        Keys are ignored unless results are on screen.
        """
        with self._lock:
            if self.state != SearchState.RENDERED or not self.results:
                return None
            count = len(self.results)
            if key == 'ArrowDown':
                self.highlighted = (self.highlighted + 1) % count
            elif key == 'ArrowUp':
                # from the unselected state ArrowUp lands on the last item
                self.highlighted = count - 1 if self.highlighted < 0 else (self.highlighted - 1) % count
            elif key == 'Enter':
                if self.highlighted >= 0:
                    return self.select(self.highlighted)
                return None
            return self.highlighted

    def select(self, index):
        item = self.results[index]
        url = selection_url(item)
        if self.on_select:
            self.on_select(item, url)
        return url

    def on_click_outside(self):
        with self._lock:
            self._cancel_timer()
            self._reset()

    def rows(self):
        """What the dropdown shows: result items, or a single message row."""
        if self.message:
            return [self.message]
        return [f"{item.get('title')} - {item.get('category_name') or item.get('category')} - {item.get('town') or ''}"
                for item in self.results]

    def _show_error(self):
        self.results = []
        self.highlighted = -1
        self.message = ERROR_MESSAGE
        self.state = SearchState.ERROR

    def _reset(self):
        # invalidates any fetch still in flight
        self._seq += 1
        self.query = ''
        self.results = []
        self.message = None
        self.highlighted = -1
        self.state = SearchState.IDLE

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
