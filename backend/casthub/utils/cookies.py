"""
Auth cookie helpers.
"""

from flask import current_app
from flask_jwt_extended import unset_jwt_cookies


def _unset_by_jwt_extended():
    """Cookie names unset_jwt_cookies already expires under the current config."""
    config = current_app.config
    names = {
        config.get('JWT_ACCESS_COOKIE_NAME', 'access_token_cookie'),
        config.get('JWT_REFRESH_COOKIE_NAME', 'refresh_token_cookie'),
    }
    if config.get('JWT_COOKIE_CSRF_PROTECT', True) and config.get('JWT_CSRF_IN_COOKIES', True):
        names.add(config.get('JWT_ACCESS_CSRF_COOKIE_NAME', 'csrf_access_token'))
        names.add(config.get('JWT_REFRESH_CSRF_COOKIE_NAME', 'csrf_refresh_token'))
    return names


def clear_auth_cookies(response):
    """
    Expire every auth cookie on a response.

    The JWT cookies are unset through Flask-JWT-Extended; any other name in
    AUTH_COOKIES_TO_CLEAR is overwritten with an empty value expiring at the
    epoch.
    """
    unset_jwt_cookies(response)

    already_unset = _unset_by_jwt_extended()
    for name in current_app.config.get('AUTH_COOKIES_TO_CLEAR', []):
        if name in already_unset:
            continue
        response.set_cookie(name, '', expires=0, path='/')

    return response
