"""API views for contact requests."""
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view
from rest_framework.request import Request
from rest_framework.response import Response

from .exceptions import MarketplaceError
from .lifecycle import LifecycleManager
from .responses import error_response
from .serializers import (
    ContactRequestCreateSerializer,
    ContactRequestSerializer,
    TransitionSerializer,
)
from .store import RequestStore


class ContactRequestViewSet(viewsets.GenericViewSet):
    serializer_class = ContactRequestSerializer
    store_class = RequestStore
    lifecycle_class = LifecycleManager
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        serializer = self.get_serializer(self.store_class().list_all(), many=True)
        return Response(serializer.data)

    def create(self, request: Request) -> Response:
        payload_serializer = ContactRequestCreateSerializer(data=request.data)
        payload_serializer.is_valid(raise_exception=True)
        try:
            contact_request = self.store_class().create(**payload_serializer.validated_data)
        except MarketplaceError as exc:
            return error_response(exc)
        return Response(
            {
                "id": contact_request.id,
                "message": "Request submitted",
                "status": contact_request.status,
            },
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request: Request, pk: str) -> Response:
        try:
            contact_request = self.store_class().get(int(pk))
        except MarketplaceError as exc:
            return error_response(exc)
        return Response(self.get_serializer(contact_request).data)

    def update(self, request: Request, pk: str) -> Response:
        """Approve or reject a pending request."""

        payload_serializer = TransitionSerializer(data=request.data)
        payload_serializer.is_valid(raise_exception=True)
        target_status = payload_serializer.validated_data["status"]
        try:
            self.lifecycle_class().transition(int(pk), target_status)
        except MarketplaceError as exc:
            return error_response(exc)
        return Response({"message": f"Request {target_status}"})

    def destroy(self, request: Request, pk: str) -> Response:
        try:
            self.store_class().delete(int(pk))
        except MarketplaceError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path=r"client/(?P<client_id>\d+)")
    def for_client(self, request: Request, client_id: str) -> Response:
        """Requests raised by one client, unresolved ones first."""

        queryset = self.store_class().list_for_client(int(client_id))
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"provider/(?P<provider_id>\d+)")
    def for_provider(self, request: Request, provider_id: str) -> Response:
        """Approved requests assigned to one provider."""

        queryset = self.store_class().list_for_provider(int(provider_id))
        return Response(self.get_serializer(queryset, many=True).data)


@api_view(["GET"])
def health(request: Request) -> Response:
    """Readiness endpoint for orchestration tooling."""

    return Response({"status": "ok"})
