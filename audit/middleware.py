from .local import set_request, clear_request

class AuditRequestMiddleware:
    """
    Keeps the current request in thread-local storage so audit signals and
    ``log_action`` can attribute changes to the acting user.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        set_request(request)
        try:
            return self.get_response(request)
        finally:
            clear_request()
