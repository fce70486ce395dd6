"""Status catalog routes (``/api/v1/statuses/``)."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.statuses.views import StatusViewSet

router = SimpleRouter(trailing_slash=True)
router.register("statuses", StatusViewSet, basename="status")

urlpatterns = router.urls
