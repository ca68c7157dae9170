import pytest

from defi_actions.core.constants.endpoints import (
    bridge_settlement_url,
    is_allowed_bridge_settlement_url,
)


def test_settlement_urls():
    assert bridge_settlement_url("LiFi") == "https://li.quest/v1/status"
    assert bridge_settlement_url("across") == "https://app.across.to/api/deposit/status"
    assert bridge_settlement_url("bungee") is None


@pytest.mark.parametrize(
    "provider,endpoint",
    [
        ("lifi", ""),
        ("lifi", "https://li.quest/v1/status"),
        ("lifi", "https://LI.QUEST:443/v1/status/"),
        ("across", "https://app.across.to/api/deposit/status"),
        ("lifi", "http://localhost:8080/anything"),
        ("across", "http://127.0.0.1/status"),
        ("unknown", "http://[::1]:9000/status"),
    ],
)
def test_allowed(provider, endpoint):
    assert is_allowed_bridge_settlement_url(provider, endpoint)


@pytest.mark.parametrize(
    "provider,endpoint",
    [
        ("lifi", "http://li.quest/v1/status"),
        ("lifi", "https://li.quest.evil.com/v1/status"),
        ("lifi", "https://li.quest:8443/v1/status"),
        ("lifi", "https://li.quest/v1/other"),
        ("lifi", "https://app.across.to/api/deposit/status"),
        ("bungee", "https://li.quest/v1/status"),
        ("lifi", "https://li.quest:notaport/v1/status"),
        ("lifi", "ftp://localhost/status"),
    ],
)
def test_rejected(provider, endpoint):
    assert not is_allowed_bridge_settlement_url(provider, endpoint)
