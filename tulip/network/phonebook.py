"""
Phonebook resolution.

A phonebook is read from a local file by bootstrap peers (server mode) and
fetched over the mesh by everyone else. Bootstrap peers are asked one at a
time, in the order the network file lists them; the first usable answer
wins and the remaining peers are not contacted.
"""

import json
import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

import requests
from .. import config
from ..errors import AllBootstrapPeersUnreachable, PhonebookReadFailed
from ..models import Phonebook, PhonebookAdapter, PublicEndpoint

logger = logging.getLogger(__name__)


def parse_phonebook(data) -> Phonebook:
    """Validate decoded JSON as a phonebook."""
    return PhonebookAdapter.validate_python(data)


def read_phonebook_file(path: Union[str, Path]) -> Phonebook:
    """
    Read a trusted phonebook.json from disk.

    Raises:
        PhonebookReadFailed on I/O or parse errors
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PhonebookReadFailed(str(path), str(e)) from e

    try:
        return parse_phonebook(json.loads(text))
    except ValueError as e:
        raise PhonebookReadFailed(str(path), str(e)) from e


def phonebook_url(vpn_ip: str, path: str = config.PHONEBOOK_PATH) -> str:
    """URL of the phonebook served by a bootstrap peer."""
    host = f"[{vpn_ip}]" if ":" in vpn_ip else vpn_ip
    return f"http://{host}{path}"


class PhonebookResolver:
    """
    Fetches the phonebook from bootstrap peers.

    One HTTP GET per peer, bounded by timeout, no retries.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = config.QUERY_TIMEOUT,
        grace_period: float = config.GRACE_PERIOD,
        path: str = config.PHONEBOOK_PATH,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the resolver.

        Args:
            session: HTTP session (a new one if None)
            timeout: Timeout in seconds for each query
            grace_period: Seconds to wait before the first query of a join
            path: Well-known phonebook path
            sleep: Sleep function
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.grace_period = grace_period
        self.path = path
        self.sleep = sleep

    def fetch(self, endpoint: PublicEndpoint) -> Phonebook:
        """
        Ask a single bootstrap peer for the phonebook.

        Raises:
            requests.RequestException on network errors, timeouts and HTTP errors
            ValueError if the body is not a phonebook
        """
        url = phonebook_url(endpoint.vpn_ip, self.path)
        logger.debug(f"GET {url} (timeout {self.timeout}s)")
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return parse_phonebook(response.json())

    def query(self, endpoints: Iterable[PublicEndpoint]) -> Phonebook:
        """
        Query bootstrap peers in order and return the first phonebook.

        Args:
            endpoints: Bootstrap peers in priority order

        Returns:
            Phonebook from the first peer that answered with one

        Raises:
            AllBootstrapPeersUnreachable if no peer did (or there are none)
        """
        failures = {}
        for endpoint in endpoints:
            try:
                phonebook = self.fetch(endpoint)
            except (requests.RequestException, ValueError) as e:
                logger.warning(f"Phonebook query to {endpoint.name} ({endpoint.vpn_ip}) failed: {e}")
                failures[endpoint.name] = str(e)
                continue

            logger.info(f"Got phonebook with {len(phonebook)} entries from {endpoint.name}")
            return phonebook

        raise AllBootstrapPeersUnreachable(failures)

    def join(self, endpoints: Iterable[PublicEndpoint]) -> Phonebook:
        """
        Wait for the grace period, then query bootstrap peers.

        Used right after bringing an interface up, before it is routable.
        """
        if self.grace_period > 0:
            logger.info(f"Waiting {self.grace_period}s before querying the phonebook")
            self.sleep(self.grace_period)
        return self.query(endpoints)
