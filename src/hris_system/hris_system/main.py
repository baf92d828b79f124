from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.api import register_error_handlers
from .container import build_container
from .database.bootstrap import seed_demo_data
from .database.memory import MemoryDatabase
from .employees.controller import register as register_employees
from .holidays.controller import register as register_holidays
from .payroll.controller import register as register_payroll
from .settings.controller import register as register_settings

logger = logging.getLogger(__name__)


def create_app(*, db: Optional[MemoryDatabase] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    org_id = int(getattr(settings, "DEFAULT_ORGANIZATION_ID", 1))
    container = build_container(
        db=db,
        default_organization_id=org_id,
        max_reported_errors=int(getattr(settings, "MAX_REPORTED_ERRORS", 20)),
    )
    app.extensions["hris_container"] = container

    if bool(getattr(settings, "SEED_DEMO_DATA", False)):
        seed_demo_data(container, organization_id=org_id)

    logger.info("[hris] settings=%s organization=%s", settings_module, org_id)

    register_error_handlers(app)
    register_employees(app, container)
    register_attendance(app, container)
    register_holidays(app, container)
    register_settings(app, container)
    register_payroll(app, container)

    return app
