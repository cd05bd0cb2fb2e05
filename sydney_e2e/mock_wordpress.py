"""Mock WordPress site for exercising the login and plugin helpers offline.

Implements only the markup the helpers rely on:
- wp-login.php: the login form, ``#login_error`` on bad credentials
- wp-admin/: redirects anonymous visitors to the login page; logged-in pages
  carry ``body.wp-admin``, ``#wpadminbar`` and ``#adminmenu``
- wp-admin/plugins.php: plugin rows with activate/deactivate/delete actions;
  deactivating elementor opens a feedback dialog with a skip button
- wp-admin/customize.php: the customizer shell
- wp-json/wp/v2/customizer/settings: the theme-mod update endpoint

State is module-level and in-memory; call ``reset_mock_state()`` between tests.
"""
from __future__ import annotations

import html
import secrets
import threading
from typing import Any, Dict, List, Optional, Set, Tuple
from urllib.parse import quote

from flask import Flask, Response, jsonify, make_response, redirect, request
from werkzeug.serving import make_server

# Default test credentials
MOCK_USERNAME = "e2e-admin"
MOCK_PASSWORD = "mock-password-123"

AUTH_COOKIE = "wordpress_logged_in_mock"

DEFAULT_PLUGINS: Dict[str, bool] = {
    "elementor": True,
    "woocommerce": True,
    "contact-form-7": False,
}

SESSIONS: Set[str] = set()
PLUGINS: Dict[str, bool] = dict(DEFAULT_PLUGINS)
PLUGIN_ACTIONS: List[Tuple[str, str, str]] = []  # (action, slug, feedback)
LOGIN_ATTEMPTS: List[str] = []  # submitted usernames
CUSTOMIZER_SETTINGS: Dict[str, Any] = {}

# Behaviour switches for failure-path tests
MOCK_OPTIONS: Dict[str, Any] = {
    # Re-render the form without an error notice on bad credentials
    "suppress_login_errors": False,
    # Where a successful login lands instead of wp-admin
    "post_login_redirect": None,
}


def reset_mock_state() -> None:
    """Reset all in-memory state to defaults."""
    SESSIONS.clear()
    PLUGINS.clear()
    PLUGINS.update(DEFAULT_PLUGINS)
    PLUGIN_ACTIONS.clear()
    LOGIN_ATTEMPTS.clear()
    CUSTOMIZER_SETTINGS.clear()
    MOCK_OPTIONS["suppress_login_errors"] = False
    MOCK_OPTIONS["post_login_redirect"] = None


def plugin_action_count(action: str, slug: str) -> int:
    return sum(1 for a, s, _ in PLUGIN_ACTIONS if a == action and s == slug)


def _page(title: str, body: str, body_class: str = "", logged_in: bool = False) -> str:
    admin_bar = ""
    if logged_in:
        admin_bar = (
            '<div id="wpadminbar"><ul><li id="wp-admin-bar-site-name">'
            '<a href="/wp-admin/">Tests</a></li></ul></div>'
        )
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{html.escape(title)} &lsaquo; Tests &#8212; WordPress</title>"
        f'</head><body class="{body_class}">{admin_bar}{body}</body></html>'
    )


def _admin_page(title: str, content: str) -> str:
    menu = (
        '<ul id="adminmenu">'
        '<li><a href="/wp-admin/">Dashboard</a></li>'
        '<li><a href="/wp-admin/plugins.php">Plugins</a></li>'
        '<li><a href="/wp-admin/customize.php">Customize</a></li>'
        "</ul>"
    )
    body = f'{menu}<div id="wpbody-content"><main><h1>{html.escape(title)}</h1>{content}</main></div>'
    return _page(title, body, body_class="wp-admin wp-core-ui", logged_in=True)


def _login_page(redirect_to: str, error: Optional[str] = None) -> str:
    notice = f'<div id="login_error">{error}</div>' if error else ""
    form = (
        '<form name="loginform" id="loginform" action="/wp-login.php" method="post">'
        '<p><label for="user_login">Username or Email Address</label>'
        '<input type="text" name="log" id="user_login" autocomplete="username"></p>'
        '<div class="user-pass-wrap"><label for="user_pass">Password</label>'
        '<input type="password" name="pwd" id="user_pass" autocomplete="current-password"></div>'
        f'<input type="hidden" name="redirect_to" value="{html.escape(redirect_to)}">'
        '<p class="submit"><input type="submit" name="wp-submit" id="wp-submit" value="Log In"></p>'
        "</form>"
    )
    body = f'<div id="login"><h1><a href="/">Tests</a></h1>{notice}{form}</div>'
    return _page("Log In", body, body_class="login login-action-login wp-core-ui")


def _plugin_row(slug: str, active: bool) -> str:
    if active:
        actions = (
            f'<span class="deactivate"><a href="/wp-admin/plugins.php?action=deactivate&plugin={slug}" '
            f'id="deactivate-{slug}">Deactivate</a></span>'
        )
    else:
        actions = (
            f'<span class="activate"><a href="/wp-admin/plugins.php?action=activate&plugin={slug}" '
            f'id="activate-{slug}">Activate</a></span> | '
            f'<span class="delete"><a href="#" id="delete-{slug}" class="delete">Delete</a></span>'
        )
    state = "active" if active else "inactive"
    return (
        f'<tr class="{state}" data-slug="{slug}"><td class="plugin-title"><strong>{slug}</strong>'
        f'<div class="row-actions visible">{actions}</div></td></tr>'
    )


def _elementor_feedback_dialog() -> str:
    return (
        '<div id="elementor-deactivate-feedback-modal" style="display:none">'
        "<p>Quick Feedback</p>"
        '<a class="dialog-lightbox-skip" '
        'href="/wp-admin/plugins.php?action=deactivate&plugin=elementor&feedback=skipped">'
        "Skip &amp; Deactivate</a></div>"
        "<script>"
        "document.getElementById('deactivate-elementor').addEventListener('click', function (e) {"
        " e.preventDefault();"
        " document.getElementById('elementor-deactivate-feedback-modal').style.display = 'block';"
        "});"
        "</script>"
    )


def create_mock_wordpress_app() -> Flask:
    """Create and configure the mock WordPress Flask app."""
    app = Flask(__name__)
    app.config['TESTING'] = True

    def _logged_in() -> bool:
        return request.cookies.get(AUTH_COOKIE) in SESSIONS

    def _require_login() -> Optional[Response]:
        if _logged_in():
            return None
        return redirect(f"/wp-login.php?redirect_to={quote(request.full_path.rstrip('?'), safe='')}&reauth=1")

    @app.route('/')
    def home():
        body = (
            '<header id="masthead"><img src="/logo.png" alt="Tests"></header>'
            "<main><h1>Tests</h1><article><p>Welcome.</p></article></main>"
        )
        return _page("Tests", body, body_class="home", logged_in=_logged_in())

    @app.route('/maintenance')
    def maintenance():
        return _page("Maintenance", "<main><h1>Briefly unavailable for scheduled maintenance.</h1></main>")

    @app.route('/wp-login.php', methods=['GET', 'POST'])
    def wp_login():
        if request.method == 'GET':
            return _login_page(request.args.get('redirect_to', '/wp-admin/'))

        username = request.form.get('log', '')
        password = request.form.get('pwd', '')
        redirect_to = request.form.get('redirect_to') or '/wp-admin/'
        LOGIN_ATTEMPTS.append(username)

        if username != MOCK_USERNAME or password != MOCK_PASSWORD:
            if MOCK_OPTIONS["suppress_login_errors"]:
                error = None
            elif username != MOCK_USERNAME:
                error = (
                    f"<strong>Error:</strong> The username <strong>{html.escape(username)}</strong> "
                    "is not registered on this site."
                )
            else:
                error = (
                    "<strong>Error:</strong> The password you entered for the username "
                    f"<strong>{html.escape(username)}</strong> is incorrect."
                )
            return _login_page(redirect_to, error)

        token = secrets.token_hex(16)
        SESSIONS.add(token)
        response = make_response(redirect(MOCK_OPTIONS["post_login_redirect"] or redirect_to))
        response.set_cookie(AUTH_COOKIE, token, httponly=True, path='/')
        return response

    @app.route('/wp-admin/')
    def dashboard():
        denied = _require_login()
        if denied:
            return denied
        return _admin_page("Dashboard", "<p>Welcome to WordPress!</p>")

    @app.route('/wp-admin/plugins.php')
    def plugins():
        denied = _require_login()
        if denied:
            return denied

        action = request.args.get('action')
        slug = request.args.get('plugin', '')
        if action in ('activate', 'deactivate') and slug in PLUGINS:
            PLUGINS[slug] = action == 'activate'
            PLUGIN_ACTIONS.append((action, slug, request.args.get('feedback', '')))
            return redirect(f"/wp-admin/plugins.php?{action}=true")

        rows = "".join(_plugin_row(s, active) for s, active in PLUGINS.items())
        content = f'<table class="wp-list-table plugins"><tbody id="the-list">{rows}</tbody></table>'
        if PLUGINS.get("elementor"):
            content += _elementor_feedback_dialog()
        return _admin_page("Plugins", content)

    @app.route('/wp-admin/customize.php')
    def customize():
        denied = _require_login()
        if denied:
            return denied
        content = (
            '<div id="customize-controls"><h2>Customizing</h2></div>'
            '<div id="customize-preview"><iframe title="Site Preview" src="/"></iframe></div>'
        )
        return _admin_page("Customize", content)

    @app.route('/wp-admin/<path:page>')
    def other_admin(page: str):
        denied = _require_login()
        if denied:
            return denied
        return _admin_page(html.escape(page), "")

    @app.route('/wp-json/wp/v2/customizer/settings', methods=['POST'])
    def customizer_settings():
        data = request.get_json(silent=True) or {}
        key = data.get('setting_key')
        if not key:
            return jsonify({"code": "rest_missing_callback_param", "message": "Missing setting_key"}), 400
        CUSTOMIZER_SETTINGS[key] = data.get('setting_value')
        return jsonify({"success": True, "setting_key": key, "setting_value": data.get('setting_value')})

    return app


class MockWordPressServer:
    """Serve the mock app on a background thread (port 0 picks a free port)."""

    def __init__(self, host: str = '127.0.0.1', port: int = 0):
        self.host = host
        self.app = create_mock_wordpress_app()
        self.server = make_server(host, port, self.app, threaded=True)
        self.port = self.server.server_port
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()

    def stop(self) -> None:
        self.server.shutdown()
        if self.thread:
            self.thread.join(timeout=5)

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/"
