import logging

from django.conf import settings
from django.db import transaction
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, IsSupportOrAdmin
from core.mail import send_portal_mail

from .models import SupportTicket, Query
from .serializers import SupportTicketSerializer, TicketReplySerializer, QuerySerializer, QueryReplySerializer

logger = logging.getLogger(__name__)


class SupportTicketView(APIView):
    """
    GET  /api/support/         admin: all tickets; others: own tickets
    POST /api/support/         {subject, message}
    PUT  /api/support/?id=     {reply}  (admin) closes the ticket
    """
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method == "PUT":
            return [IsAdminRole()]
        return super().get_permissions()

    def get(self, request):
        qs = SupportTicket.objects.select_related("partner").order_by("-created_at", "-id")
        if not request.user.is_portal_admin:
            qs = qs.filter(partner=request.user)
        st = (request.query_params.get("status") or "").strip().lower()
        if st in dict(SupportTicket.STATUS_CHOICES):
            qs = qs.filter(status=st)
        return Response(SupportTicketSerializer(qs, many=True).data, status=200)

    def post(self, request):
        ser = SupportTicketSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        with transaction.atomic():
            ticket = ser.save(partner=request.user)
            send_portal_mail(
                f"New Support Ticket: {ticket.subject}",
                f"You have received a new support ticket from {request.user.email}:\n\n{ticket.message}",
                [getattr(settings, "SUPPORT_MAIL", "")],
            )
        logger.info("Support ticket %s opened by %s", ticket.id, request.user.pk)
        return Response(SupportTicketSerializer(ticket).data, status=status.HTTP_201_CREATED)

    def put(self, request):
        ticket_id = (request.query_params.get("id") or "").strip()
        if not ticket_id.isdigit():
            return Response({"message": "Ticket ID is required"}, status=400)
        ser = TicketReplySerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        with transaction.atomic():
            ticket = SupportTicket.objects.select_for_update().select_related("partner").filter(pk=int(ticket_id)).first()
            if ticket is None:
                return Response({"message": "Ticket not found"}, status=404)
            if ticket.status == SupportTicket.STATUS_CLOSED:
                return Response({"message": "Ticket is already closed"}, status=400)
            ticket.reply = ser.validated_data["reply"]
            ticket.status = SupportTicket.STATUS_CLOSED
            ticket.replied_by = request.user
            ticket.save(update_fields=["reply", "status", "replied_by", "updated_at"])
            send_portal_mail(
                f"Your Support Ticket #{ticket.id} Has Been Closed",
                (
                    f"Dear Partner,\n\nYour support ticket with the subject \"{ticket.subject}\" has been closed.\n\n"
                    f"Reply: {ticket.reply}\n\nThank you for reaching out to us!\n\nBest Regards,\nSupport Team"
                ),
                [ticket.partner.email],
            )
        return Response(
            {"message": "Ticket closed successfully, and email sent.", "ticket": SupportTicketSerializer(ticket).data},
            status=200,
        )


class QueryView(APIView):
    """
    GET  /api/queries/?userId=   support/admin: all (or one user's); others: own
    POST /api/queries/           {query}
    PUT  /api/queries/           {id, reply?, status?}  (support/admin)
    """
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method == "PUT":
            return [IsSupportOrAdmin()]
        return super().get_permissions()

    def get(self, request):
        qs = Query.objects.select_related("created_by", "resolved_by").order_by("-created_at", "-id")
        user = request.user
        if user.role == "support" or user.is_portal_admin:
            uid = (request.query_params.get("userId") or "").strip()
            if uid.isdigit():
                qs = qs.filter(created_by_id=int(uid))
        else:
            qs = qs.filter(created_by=user)
        return Response(QuerySerializer(qs, many=True).data, status=200)

    def post(self, request):
        ser = QuerySerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        q = ser.save(created_by=request.user)
        return Response(QuerySerializer(q).data, status=status.HTTP_201_CREATED)

    def put(self, request):
        ser = QueryReplySerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        q = Query.objects.filter(pk=data["id"]).first()
        if q is None:
            return Response({"error": "Query not found"}, status=404)
        fields = ["resolved_by", "updated_at"]
        if "reply" in data:
            q.reply = data["reply"]
            fields.append("reply")
        if "status" in data:
            q.status = data["status"]
            fields.append("status")
        q.resolved_by = request.user
        q.save(update_fields=fields)
        return Response(QuerySerializer(q).data, status=200)
