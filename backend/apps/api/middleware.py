from django.utils.deprecation import MiddlewareMixin
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response

from apps.api.validation import validate_request_context
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="middleware")


def _prepare_for_render(response):
    # Responses built outside a DRF view never went through content negotiation.
    if isinstance(response, Response) and not getattr(response, "accepted_renderer", None):
        renderer = JSONRenderer()
        response.accepted_renderer = renderer
        response.accepted_media_type = renderer.media_type
        response.renderer_context = {"response": response}
    return response


class RequestValidationMiddleware(MiddlewareMixin):
    """
    Runs authentication and query validation for API views before the view
    itself is dispatched. Plain Django views pass through untouched.
    """

    def process_view(self, request, view_func, view_args, view_kwargs):
        view_class = getattr(view_func, "view_class", None)
        if not view_class:
            return None
        view_name = getattr(view_class, "__name__", str(view_class))
        method = getattr(request, "method", None)
        logger.debug("Validating request context", view=view_name, method=method)
        response = validate_request_context(request, view_class, view_kwargs)
        if response is None:
            return None
        logger.info(
            "Request blocked by validation",
            view=view_name,
            method=method,
            status=getattr(response, "status_code", None),
        )
        return _prepare_for_render(response)
