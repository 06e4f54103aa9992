from typing import Callable

from django.conf import settings


class CsrfExemptApiMiddleware:
    """
    Skip CSRF enforcement for JSON API paths.

    API callers authenticate with JWT Bearer tokens rather than the session
    cookie, so only requests under API_PATH_PREFIX (default "/api/") are
    exempted. The Django admin keeps full CSRF protection.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response
        self.prefix = getattr(settings, "API_PATH_PREFIX", "/api/")

    def __call__(self, request):
        path = getattr(request, "path", "") or ""
        if path.startswith(self.prefix):
            # Read by CsrfViewMiddleware.process_view
            setattr(request, "_dont_enforce_csrf", True)
        return self.get_response(request)
