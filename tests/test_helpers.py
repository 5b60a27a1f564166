"""
Tests for helpers, row mapping and outbound service adapters
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from structlog.testing import capture_logs
from telegram.error import NetworkError

from chiya.application.interfaces.identity_provider import AuthSession
from chiya.domain.value_objects.money import Money
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.infrastructure.repositories.row_mapper import (
    order_from_row,
    parse_timestamp,
    status_from_storage,
    status_to_storage,
)
from chiya.infrastructure.services.alert_sinks import (
    LoggingAlertSink,
    TelegramAlertSink,
    format_new_order_message,
)
from chiya.infrastructure.services.http_blob_storage import HttpBlobStorage
from chiya.infrastructure.services.http_identity_provider import HttpIdentityProvider
from chiya.infrastructure.utilities.exceptions import (
    ExternalServiceError,
    ValidationError,
)
from chiya.infrastructure.utilities.helpers import build_table_url, parse_entry_url


class TestEntryUrls:
    """Test customer entry URL helpers"""

    def test_build_table_url(self):
        assert (
            build_table_url("https://order.example.com/", "chiya-corner", 3)
            == "https://order.example.com/menu/chiya-corner?table=3"
        )

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://x/menu/chiya-corner?table=5", ("chiya-corner", "5")),
            ("https://x/menu/chiya-corner", ("chiya-corner", None)),
            ("https://x/menu/chiya-corner?table=abc", ("chiya-corner", "abc")),
            ("https://x/admin", (None, None)),
        ],
    )
    def test_parse_entry_url(self, url, expected):
        assert parse_entry_url(url) == expected


class TestRowMapper:
    """Test storage row mapping"""

    def test_started_is_stored_as_preparing(self):
        assert status_to_storage(OrderStatus.STARTED) == "preparing"
        assert status_to_storage("started") == "preparing"
        assert status_from_storage("preparing") is OrderStatus.STARTED
        assert status_from_storage("started") is OrderStatus.STARTED

    def test_naive_timestamps_are_utc(self):
        assert parse_timestamp("2026-03-01T09:30:00") == datetime(
            2026, 3, 1, 9, 30, tzinfo=UTC
        )
        assert parse_timestamp("2026-03-01T09:30:00Z").tzinfo is not None
        assert parse_timestamp(None) is None

    def test_order_from_row(self, order_factory):
        items = order_factory().items
        row = {
            "id": "order-9",
            "shop_id": "shop-1",
            "table_number": "7",
            "status": "preparing",
            "total_amount": "110.00",
            "created_at": "2026-03-01T09:30:00+00:00",
        }

        order = order_from_row(row, items, "USD")

        assert order.table_number == 7
        assert order.status is OrderStatus.STARTED
        assert order.total_amount == Money(Decimal("110"), "USD")
        assert order.items == items
        assert order.updated_at is None


class TestAlertSinks:
    """Test new-order alert delivery"""

    def test_message_lists_items_and_total(self, order_factory, shop):
        shop.name = "Chiya <Corner>"

        message = format_new_order_message(order_factory(), shop)

        assert "New order at Chiya &lt;Corner&gt;" in message
        assert "🪑 Table: <b>5</b>" in message
        assert "📅 01/03/2026 09:30" in message
        assert "• 2x Masala Tea - NPR 80.00" in message
        assert message.endswith("NPR 110.00")

    @pytest.mark.asyncio
    async def test_telegram_sends_html(self, order_factory, shop):
        bot = MagicMock()
        bot.send_message = AsyncMock(return_value=MagicMock(message_id=17))
        sink = TelegramAlertSink(bot, admin_chat_id=42)

        await sink.new_order_alert(order_factory(), shop)

        kwargs = bot.send_message.call_args.kwargs
        assert kwargs["chat_id"] == 42
        assert kwargs["parse_mode"] == "HTML"
        assert "Masala Tea" in kwargs["text"]

    @pytest.mark.asyncio
    async def test_telegram_failure(self, order_factory, shop):
        bot = MagicMock()
        bot.send_message = AsyncMock(side_effect=NetworkError("unreachable"))
        sink = TelegramAlertSink(bot, admin_chat_id=42)

        with pytest.raises(ExternalServiceError):
            await sink.new_order_alert(order_factory(), shop)

    @pytest.mark.asyncio
    async def test_structured_event(self, order_factory, shop):
        with capture_logs() as logs:
            await LoggingAlertSink().new_order_alert(order_factory(), shop)

        assert logs[0]["event"] == "new_order"
        assert logs[0]["order_id"] == "order-1"
        assert logs[0]["items"] == 3
        assert logs[0]["total"] == "110.00"


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


SESSION = AuthSession(user_id="user-1", email="owner@example.com", access_token="tok")


class TestHttpIdentityProvider:
    """Test the HTTP identity provider"""

    @pytest.mark.asyncio
    async def test_sign_in(self):
        def handler(request):
            assert request.url.path == "/auth/v1/token"
            assert request.url.params["grant_type"] == "password"
            assert request.headers["apikey"] == "anon"
            assert json.loads(request.content)["email"] == "owner@example.com"
            return httpx.Response(
                200,
                json={"access_token": "tok", "user": {"id": "user-1", "email": "owner@example.com"}},
            )

        provider = HttpIdentityProvider("https://auth.example.com/", "anon", mock_client(handler))

        session = await provider.sign_in("owner@example.com", "secret")

        assert session == SESSION

    @pytest.mark.asyncio
    async def test_bad_credentials(self):
        provider = HttpIdentityProvider(
            "https://auth.example.com",
            "anon",
            mock_client(lambda request: httpx.Response(400, json={"error": "invalid_grant"})),
        )

        with pytest.raises(ValidationError):
            await provider.sign_in("owner@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_role_claim(self):
        def handler(request):
            assert request.url.path == "/rest/v1/user_roles"
            assert request.url.params["user_id"] == "eq.user-1"
            assert request.headers["Authorization"] == "Bearer tok"
            return httpx.Response(200, json=[{"role": "admin", "shop_id": "shop-1"}])

        provider = HttpIdentityProvider("https://auth.example.com", "anon", mock_client(handler))

        claim = await provider.get_role_claim(SESSION)

        assert claim.is_admin is True
        assert claim.shop_id == "shop-1"

    @pytest.mark.asyncio
    async def test_no_role_claim(self):
        provider = HttpIdentityProvider(
            "https://auth.example.com",
            "anon",
            mock_client(lambda request: httpx.Response(200, json=[])),
        )
        assert await provider.get_role_claim(SESSION) is None

    @pytest.mark.asyncio
    async def test_server_error(self):
        provider = HttpIdentityProvider(
            "https://auth.example.com",
            "anon",
            mock_client(lambda request: httpx.Response(503)),
        )
        with pytest.raises(ExternalServiceError):
            await provider.get_role_claim(SESSION)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        provider = HttpIdentityProvider("https://auth.example.com", "anon", mock_client(handler))

        with pytest.raises(ExternalServiceError):
            await provider.sign_out(SESSION)

    def test_url_required(self):
        with pytest.raises(ValueError):
            HttpIdentityProvider("", "anon")


class TestHttpBlobStorage:
    """Test the HTTP blob storage"""

    @pytest.mark.asyncio
    async def test_upload_returns_public_url(self):
        def handler(request):
            assert request.method == "POST"
            assert request.url.path == "/storage/v1/object/shop-logos/shop-1/logo-1.png"
            assert request.headers["Content-Type"] == "image/png"
            assert request.content == b"\x89PNG"
            return httpx.Response(200, json={"Key": "shop-logos/shop-1/logo-1.png"})

        storage = HttpBlobStorage(
            "https://files.example.com", "shop-logos", "key", mock_client(handler)
        )

        url = await storage.upload("shop-1/logo-1.png", b"\x89PNG", "image/png")

        assert url == (
            "https://files.example.com/storage/v1/object/public/shop-logos/shop-1/logo-1.png"
        )

    @pytest.mark.asyncio
    async def test_upload_failure(self):
        storage = HttpBlobStorage(
            "https://files.example.com",
            "shop-logos",
            "key",
            mock_client(lambda request: httpx.Response(413)),
        )
        with pytest.raises(ExternalServiceError):
            await storage.upload("shop-1/logo.png", b"x", "image/png")
