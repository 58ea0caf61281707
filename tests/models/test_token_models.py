"""Tests for request encoding and token response models."""

import pytest
from pydantic import ValidationError

from codegrant.models.client import OAuthClient
from codegrant.models.flow import AuthorizationRequest, FlowState, ResponseType
from codegrant.models.tokens import (
    GrantType,
    RefreshTokenRequest,
    TokenExchangeRequest,
    TokenExchangeResult,
)


class TestAuthorizationRequestParams:
    def test_query_params_taken_verbatim(self):
        # Arrange
        request = AuthorizationRequest(
            endpoint="https://auth.example.com/authorize",
            client=OAuthClient(client_id="client-123", client_secret="secret"),
            redirect_uri="https://myapp.com/callback",
            scope="read write",
            state="xyz",
        )

        # Act
        params = request.to_query_params()

        # Assert
        assert params == {
            "client_id": "client-123",
            "response_type": "code",
            "redirect_uri": "https://myapp.com/callback",
            "scope": "read write",
            "state": "xyz",
        }

    def test_response_type_defaults_to_code(self):
        request = AuthorizationRequest(
            endpoint="https://auth.example.com/authorize",
            client=OAuthClient(client_id="client-123"),
            redirect_uri="https://myapp.com/callback",
            scope="read",
            state="xyz",
        )

        assert request.response_type is ResponseType.CODE


class TestTokenExchangeRequest:
    def test_form_data_for_confidential_client(self):
        # Arrange
        request = TokenExchangeRequest(
            endpoint="https://auth.example.com/token",
            code="auth-code-123",
            client=OAuthClient(client_id="client-456", client_secret="s3cret"),
            redirect_uri="https://myapp.com/callback",
        )

        # Act
        data = request.to_form_data()

        # Assert
        assert data == {
            "grant_type": "authorization_code",
            "code": "auth-code-123",
            "redirect_uri": "https://myapp.com/callback",
            "client_id": "client-456",
            "client_secret": "s3cret",
        }

    def test_public_client_omits_client_secret(self):
        request = TokenExchangeRequest(
            endpoint="https://auth.example.com/token",
            code="auth-code-123",
            client=OAuthClient(client_id="client-456"),
            redirect_uri="https://myapp.com/callback",
        )

        assert "client_secret" not in request.to_form_data()

    def test_grant_type_is_fixed(self):
        request = TokenExchangeRequest(
            endpoint="https://auth.example.com/token",
            code="auth-code-123",
            client=OAuthClient(client_id="client-456"),
            redirect_uri="https://myapp.com/callback",
        )

        assert request.grant_type is GrantType.AUTHORIZATION_CODE
        with pytest.raises(TypeError):
            TokenExchangeRequest(
                endpoint="https://auth.example.com/token",
                code="auth-code-123",
                client=OAuthClient(client_id="client-456"),
                redirect_uri="https://myapp.com/callback",
                grant_type="refresh_token",
            )

    def test_secrets_hidden_from_repr(self):
        request = TokenExchangeRequest(
            endpoint="https://auth.example.com/token",
            code="auth-code-123",
            client=OAuthClient(client_id="client-456", client_secret="s3cret"),
            redirect_uri="https://myapp.com/callback",
        )

        assert "auth-code-123" not in repr(request)
        assert "s3cret" not in repr(request)


class TestRefreshTokenRequest:
    def test_form_data_without_scope(self):
        request = RefreshTokenRequest(
            endpoint="https://auth.example.com/token",
            refresh_token="refresh-abc",
        )

        assert request.to_form_data() == {
            "grant_type": "refresh_token",
            "refresh_token": "refresh-abc",
        }

    def test_form_data_with_scope_and_client(self):
        # Arrange
        request = RefreshTokenRequest(
            endpoint="https://auth.example.com/token",
            refresh_token="refresh-abc",
            scope="read",
            client=OAuthClient(client_id="client-456", client_secret="s3cret"),
        )

        # Act
        data = request.to_form_data()

        # Assert
        assert data["scope"] == "read"
        assert data["client_id"] == "client-456"
        assert data["client_secret"] == "s3cret"
        assert request.grant_type is GrantType.REFRESH_TOKEN


class TestTokenExchangeResult:
    def test_minimal_response(self):
        # Act
        token = TokenExchangeResult.model_validate(
            {"access_token": "T", "token_type": "bearer", "expires_in": 3600}
        )

        # Assert
        assert token.access_token == "T"
        assert token.token_type == "bearer"
        assert token.expires_in == 3600
        assert token.refresh_token is None
        assert token.scope is None
        assert token.extension_parameters == {}

    def test_extension_parameters_are_kept(self):
        token = TokenExchangeResult.model_validate(
            {
                "access_token": "2YotnFZFEjr1zCsicMWpAA",
                "token_type": "example",
                "example_parameter": "example_value",
                "id_token": "eyJ...",
            }
        )

        assert token.example_parameter == "example_value"
        assert token.extension_parameters == {"id_token": "eyJ..."}

    def test_result_is_immutable(self):
        token = TokenExchangeResult(access_token="T", token_type="bearer")

        with pytest.raises(ValidationError):
            token.access_token = "other"

    def test_calculate_expires_at(self):
        token = TokenExchangeResult(
            access_token="T", token_type="bearer", expires_in=3600
        )

        assert token.calculate_expires_at(issued_at=1000.0) == 4600.0
        assert token.calculate_expires_at() is not None

    def test_no_expiry_when_expires_in_absent(self):
        token = TokenExchangeResult(access_token="T", token_type="bearer")

        assert token.calculate_expires_at(issued_at=1000.0) is None


class TestFlowState:
    def test_terminal_states(self):
        terminal = {state for state in FlowState if state.is_terminal}

        assert terminal == {
            FlowState.AUTHORIZATION_DENIED,
            FlowState.TOKEN_OBTAINED,
            FlowState.TOKEN_EXCHANGE_FAILED,
        }

