"""API views for marketplace accounts."""
from __future__ import annotations

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import api_view
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response

from contact_requests.exceptions import MarketplaceError, ValidationError
from contact_requests.responses import error_response

from .models import User
from .serializers import ProviderStatusSerializer, RegistrationSerializer, UserSerializer
from .services import AccountService


class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = User.objects.all()
    serializer_class = UserSerializer
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ["name", "email", "service", "location"]
    ordering_fields = ["name", "created_at"]
    ordering = ["name"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore[override]
        queryset = super().get_queryset()
        role = self.request.query_params.get("role")
        if role:
            queryset = queryset.filter(role=role.upper())
        return queryset

    def update(self, request: Request, *args, **kwargs) -> Response:  # type: ignore[override]
        """Update profile fields; the system account is read-only."""

        if self.get_object().is_system:
            return error_response(ValidationError("The system account cannot be modified"))
        return super().update(request, *args, **kwargs)

    def destroy(self, request: Request, pk: str) -> Response:
        """Delete a user together with their contact requests."""

        try:
            AccountService().delete_user(int(pk))
        except MarketplaceError as exc:
            return error_response(exc)
        return Response({"message": "User deleted"})


@api_view(["POST"])
def register(request: Request) -> Response:
    serializer = RegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        user = AccountService().register(**serializer.validated_data)
    except MarketplaceError as exc:
        return error_response(exc)
    return Response(
        {"message": "User created", "user": UserSerializer(user).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
def pending_providers(request: Request) -> Response:
    """Provider accounts awaiting admin approval."""

    providers = User.objects.pending_providers().order_by("created_at")
    return Response(UserSerializer(providers, many=True).data)


@api_view(["PUT"])
def provider_status(request: Request, provider_id: int) -> Response:
    """Approve or reject a provider account."""

    serializer = ProviderStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    new_status = serializer.validated_data["status"]
    try:
        AccountService().set_provider_status(provider_id, new_status)
    except MarketplaceError as exc:
        return error_response(exc)
    return Response({"message": f"Provider {new_status}"})
