from typing import Any, Mapping

import dotenv
from flask import Flask, redirect, render_template_string

from .config import provider_from
from .persistence import OAuthPersistence
from .token import TokenClient

PAGE = """<!doctype html>
<title>{{ title }}</title>
<p>{{ message }}</p>
"""


def create_app(
    config: Mapping[str, Any] | None = None,
    persistence: OAuthPersistence | None = None,
    token_client: TokenClient | None = None,
) -> Flask:
    app = Flask(__name__)
    _ = app.config.from_prefixed_env()
    if config is not None:
        app.config.update(config)

    provider = provider_from(app.config, persistence, token_client)
    app.register_blueprint(provider.blueprint())
    app.extensions["oauth"] = provider

    @app.get("/")
    @provider.auth_filter
    def page_home():
        return render_template_string(PAGE, title="home", message="signed in")

    @app.route("/auth/logout")
    def auth_logout():
        return provider.persistence.invalidate(redirect("/", 303))

    return app


if __name__ == "__main__":
    _ = dotenv.load_dotenv()
    create_app().run()
