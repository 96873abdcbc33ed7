"""View functions for health checks."""

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from availability.store import get_board_pointer


@require_GET
def health_check(request):
    """Return a simple health-check response, including whether a board is tracked."""
    pointer = get_board_pointer()
    return JsonResponse({"status": "ok", "board_tracked": pointer is not None})
