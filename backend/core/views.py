from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from commissions.services.calculator import CANONICAL_SLABS, renewal_factor
from leads.models import Lead


class PortalInfoView(APIView):
    """
    GET /api/portal/
    Static reference data for the frontend: slab ranges, lead platforms and statuses.
    """
    authentication_classes = []  # public
    permission_classes = []

    def get(self, request):
        data = {
            "name": "Trading Kulture Partner Portal",
            "commission": {
                "slabs": [{"range": key, "min": lo, "max": hi} for key, lo, hi in CANONICAL_SLABS],
                "renewal_factor": str(renewal_factor()),
            },
            "lead_platforms": [p for p, _ in Lead.PLATFORM_CHOICES],
            "lead_statuses": [s for s, _ in Lead.STATUS_CHOICES],
        }
        return Response(data, status=status.HTTP_200_OK)


class HealthzView(APIView):
    """
    GET /healthz
    Lightweight health check with DB ping.
    """
    authentication_classes = []
    permission_classes = []

    def get(self, request):
        from django.db import connection
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except Exception as e:
            return Response({"status": "error", "db": False, "error": str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"status": "ok", "db": True}, status=status.HTTP_200_OK)
