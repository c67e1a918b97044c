"""
Custom middleware for webinar_bridge.
"""
from django.middleware.common import CommonMiddleware


class APICommonMiddleware(CommonMiddleware):
    """
    CommonMiddleware without APPEND_SLASH for /api/ routes.
    Generated artifacts are addressed by filename, so
    /api/v1/generate/form/<name>.html must not be redirected.
    """
    def should_redirect_with_slash(self, request):
        if request.path.startswith('/api/'):
            return False
        return super().should_redirect_with_slash(request)
