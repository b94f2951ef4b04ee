"""
Gas Price Scraper
=================
Fetches the current regular-grade price for a fuel station by pattern matching
the station page's embedded JSON.

The page structure belongs to a third party and can change at any time, so the
only contract is ``fetch_station_price(station_id) -> float | None``.  Every
failure (network error, bad status, no match) is logged and returns None; the
caller decides what to fall back to.
"""
import logging
import re

import requests

logger = logging.getLogger(__name__)

DEFAULT_URL_TEMPLATE = 'https://www.gasbuddy.com/station/{station_id}'
REGULAR_PRICE_PATTERN = re.compile(r'"regular"\s*:\s*\{[^}]*"price"\s*:\s*(\d+\.\d+)', re.IGNORECASE)
REQUEST_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (compatible; MilesAhead/1.0)',
    'Accept': 'text/html,application/xhtml+xml',
}


def parse_regular_price(html):
    """Extract the regular-grade price from station page markup"""
    match = REGULAR_PRICE_PATTERN.search(html or '')
    if not match:
        return None
    return float(match.group(1))


def fetch_station_price(station_id, url_template=DEFAULT_URL_TEMPLATE, timeout=10):
    """
    Scrape the current price for ``station_id``.

    Returns:
        float price per gallon, or None on any failure.
    """
    url = url_template.format(station_id=station_id)
    try:
        response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f'Failed to fetch gas price for station {station_id}: {e}')
        return None

    price = parse_regular_price(response.text)
    if price is None:
        logger.warning(f'No regular price found on page for station {station_id}')
    return price


def configured_fetcher(app):
    """Bind ``fetch_station_price`` to the app's URL template and timeout"""
    url_template = app.config.get('GAS_PRICE_URL_TEMPLATE') or DEFAULT_URL_TEMPLATE
    timeout = app.config.get('GAS_PRICE_TIMEOUT', 10)

    def fetch(station_id):
        return fetch_station_price(station_id, url_template=url_template, timeout=timeout)

    return fetch


def get_fetcher():
    """The price fetcher registered on the current app"""
    from flask import current_app
    return current_app.extensions['gas_price_fetcher']
