# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from parkingslot.infrastructure.admin_setup import setup_admin_user
from parkingslot.infrastructure.container import Container, container
from parkingslot.infrastructure.db import init_db
from parkingslot.infrastructure.db.models import Carpark, User
from parkingslot.infrastructure.repositories.carparks.sqlalchemy_carpark_repository import (
    CARPARK_SORT_MAPPING,
)
from parkingslot.infrastructure.repositories.users.sqlalchemy_user_repository import (
    USER_SORT_MAPPING,
)
from parkingslot.interfaces.http.controllers.misc_controller import MiscController
from parkingslot.interfaces.http.pagination import PAGINATION_HEADER
from parkingslot.shared.logging import logger, setup_logging
from parkingslot.shared.middleware.error_handler import configure_error_handling
from parkingslot.shared.middleware.request_logger import CORRELATION_HEADER, configure_request_logging
from parkingslot.shared.middleware.security_headers import configure_security_headers


def _validate_sort_mappings() -> None:
    USER_SORT_MAPPING.validate(User)
    CARPARK_SORT_MAPPING.validate(Carpark)


def create_app(app_container: Container | None = None) -> Flask:
    app_container = app_container or container
    config = app_container.config

    setup_logging(debug_mode=config.debug_logging)
    _validate_sort_mappings()
    init_db()

    setup_admin_user(app_container.user_repository)

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)
    configure_security_headers(app)

    app.config.update(SECRET_KEY=config.auth.secret_key, JSON_SORT_KEYS=False)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}},
        "expose_headers": [PAGINATION_HEADER, CORRELATION_HEADER],
    }
    CORS(app, **cors_kwargs)

    app.register_blueprint(MiscController().as_blueprint())
    app.register_blueprint(app_container.users_controller.as_blueprint())
    app.register_blueprint(app_container.carparks_controller.as_blueprint())

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
