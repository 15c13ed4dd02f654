"""Example: drive the service layer directly (no Flask).

Controllers are thin; the rules live in the services.
"""

import importlib

from dayflow.config import get_settings_module
from dayflow.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    profile = container.auth_service.authenticate("employee@dayflow.local", "employee123")
    ctx = container.identity_resolver.resolve(profile.id)

    for record in container.attendance_service.list_records(ctx, range_="month"):
        print(container.attendance_service.to_row(record))
    print(container.payroll_service.view(ctx, target_user_id=ctx.user_id) or "No payroll configured")


if __name__ == "__main__":
    main()
