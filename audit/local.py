import threading

_local = threading.local()


def set_request(req):
    _local.request = req


def get_request():
    return getattr(_local, "request", None)


def clear_request():
    if hasattr(_local, "request"):
        delattr(_local, "request")


def current_actor() -> dict:
    """Who is acting right now; empty values outside a request (threads, commands)."""
    req = get_request()
    user = getattr(req, "user", None)
    authed = getattr(user, "is_authenticated", False)
    meta = getattr(req, "META", {}) if req else {}
    return {
        "actor": user if authed else None,
        "actor_email": getattr(user, "email", "") if authed else "",
        "ip_address": meta.get("REMOTE_ADDR"),
        "user_agent": meta.get("HTTP_USER_AGENT"),
    }
