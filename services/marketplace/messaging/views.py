"""API views for contact request message threads."""
from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from contact_requests.exceptions import MarketplaceError
from contact_requests.responses import error_response

from .ledger import MessageLedger
from .serializers import MessageCreateSerializer, MessageSerializer


class LedgerView(APIView):
    ledger_class = MessageLedger

    def get_ledger(self) -> MessageLedger:
        return self.ledger_class()


class MessageCollectionView(LedgerView):
    def post(self, request: Request) -> Response:
        payload_serializer = MessageCreateSerializer(data=request.data)
        payload_serializer.is_valid(raise_exception=True)
        data = payload_serializer.validated_data
        try:
            message = self.get_ledger().append(
                data["contact_request_id"],
                data["sender_id"],
                data["sender_role"],
                data["message"],
                sender_name=data["sender_name"],
            )
        except MarketplaceError as exc:
            return error_response(exc)
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class MessageThreadView(LedgerView):
    def get(self, request: Request, contact_request_id: int) -> Response:
        messages = self.get_ledger().list_for(contact_request_id)
        return Response(MessageSerializer(messages, many=True).data)


class MessageReadView(LedgerView):
    def post(self, request: Request, message_id: int) -> Response:
        try:
            message = self.get_ledger().mark_read(message_id)
        except MarketplaceError as exc:
            return error_response(exc)
        return Response(MessageSerializer(message).data)
