"""Material company routes (``/api/v1/material-companies/``)."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.materials.views import MaterialCompanyViewSet

router = SimpleRouter(trailing_slash=True)
router.register("material-companies", MaterialCompanyViewSet, basename="material-company")

urlpatterns = router.urls
