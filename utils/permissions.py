"""
Client IP allow-list.

When ``ALLOWED_IPS`` is configured, every request from an address not in the
list is refused with 403 before it reaches a view.  The client address is taken
from the first proxy header present, in this order::

    X-Forwarded-For (first entry)
    X-Real-IP
    CF-Connecting-IP (Cloudflare)
    request.remote_addr

An empty list disables the check.  Static assets are always served.
"""

from flask import abort, current_app, request


PROXY_HEADERS = ('X-Forwarded-For', 'X-Real-IP', 'CF-Connecting-IP')


def get_client_ip():
    """Best-effort client address for the current request."""
    for header in PROXY_HEADERS:
        value = request.headers.get(header)
        if value:
            return value.split(',')[0].strip()
    return request.remote_addr or 'unknown'


def is_ip_allowed(ip, allowed_ips):
    if not allowed_ips:
        return True
    return ip in allowed_ips


def check_ip_access():
    """Abort 403 when the client address is not allowed."""
    if request.endpoint == 'static':
        return
    allowed_ips = current_app.config.get('ALLOWED_IPS') or []
    if not allowed_ips:
        return

    ip = get_client_ip()
    if not is_ip_allowed(ip, allowed_ips):
        current_app.logger.warning(f'Blocked access from IP: {ip}')
        abort(403)
    current_app.logger.debug(f'Allowed access from IP: {ip}')
