"""Response headers telling the front-end what happened to an entity."""

from riders_api.core.config import settings

ENTITY_NAME = "event"


def entity_alert(action: str, entity_id: int | str) -> dict[str, str]:
    app = settings.app_name
    return {
        f"X-{app}-alert": f"{app}.{ENTITY_NAME}.{action}",
        f"X-{app}-params": str(entity_id),
    }


def failure_alert(error_key: str) -> dict[str, str]:
    app = settings.app_name
    return {
        f"X-{app}-error": f"error.{error_key}",
        f"X-{app}-params": ENTITY_NAME,
    }
