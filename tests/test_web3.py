import json

import pytest

from meta_adapter.core.config import Settings
from meta_adapter.api.execution.web3 import DEMO_WALLET_ADDRESS, WEB3_ENDPOINTS, Web3Executor

WALLET = "0xabc123"


@pytest.fixture
def keyed_settings():
    return Settings(
        _env_file=None,
        MORALIS_API_KEY="moralis-key",
        ALCHEMY_API_KEY="alchemy-key",
        HELIUS_API_KEY="helius-key",
    )


@pytest.fixture
def web3(keyed_settings, http_client):
    return Web3Executor(settings=keyed_settings, client=http_client)


@pytest.mark.asyncio
async def test_missing_provider_key(test_settings, http_client, upstream):
    executor = Web3Executor(settings=test_settings, client=http_client)

    result = await executor.execute_web3_endpoint("web3.moralis.wallet_balance", {"address": WALLET})

    assert not result.success
    assert "API key" in result.error
    assert result.provider == "moralis"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_missing_key_reported_before_missing_params(test_settings, http_client):
    executor = Web3Executor(settings=test_settings, client=http_client)

    result = await executor.execute_web3_endpoint("web3.moralis.wallet_balance", {})

    assert result.error == "API key not configured for moralis"
    assert result.missing_params == []


@pytest.mark.asyncio
async def test_missing_address(web3, upstream):
    result = await web3.execute_web3_endpoint("web3.moralis.wallet_balance", {})

    assert not result.success
    assert result.missing_params == ["address"]
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_unknown_endpoint(web3):
    result = await web3.execute_web3_endpoint("web3.moralis.nothing")

    assert not result.success
    assert result.provider == "unknown"


@pytest.mark.asyncio
async def test_moralis_request_shape(web3, upstream):
    upstream.add("https://deep-index.moralis.io", json={"balance": "1000"})

    result = await web3.execute_web3_endpoint("web3.moralis.wallet_balance", {"address": WALLET})

    assert result.success
    assert result.data == {"balance": "1000"}
    assert result.chain == "eth"
    request = upstream.requests[0]
    assert str(request.url) == f"https://deep-index.moralis.io/api/v2.2/{WALLET}/balance?chain=eth"
    assert request.headers["X-API-Key"] == "moralis-key"


@pytest.mark.asyncio
async def test_chain_param_overrides_default(web3, upstream):
    await web3.execute_web3_endpoint("web3.moralis.nfts", {"address": WALLET, "chain": "polygon"})

    assert upstream.urls() == [f"https://deep-index.moralis.io/api/v2.2/{WALLET}/nft?chain=polygon"]


@pytest.mark.asyncio
async def test_alchemy_gas_price_is_json_rpc(web3, upstream):
    upstream.add("https://eth-mainnet.g.alchemy.com/v2/", json={"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"})

    result = await web3.execute_web3_endpoint("web3.alchemy.gas_price")

    assert result.success
    request = upstream.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://eth-mainnet.g.alchemy.com/v2/alchemy-key"
    assert json.loads(request.content) == {"jsonrpc": "2.0", "method": "eth_gasPrice", "params": [], "id": 1}
    assert "X-API-Key" not in request.headers


@pytest.mark.asyncio
async def test_alchemy_token_balances_body(web3, upstream):
    await web3.execute_web3_endpoint("web3.alchemy.token_balances", {"address": WALLET})

    body = json.loads(upstream.requests[0].content)
    assert body["method"] == "alchemy_getTokenBalances"
    assert body["params"] == [WALLET, "erc20"]


@pytest.mark.asyncio
async def test_alchemy_nft_key_in_path(web3, upstream):
    await web3.execute_web3_endpoint("web3.alchemy.nft_ownership", {"address": WALLET})

    assert upstream.urls() == [
        f"https://eth-mainnet.g.alchemy.com/nft/v3/alchemy-key/getNFTsForOwner?owner={WALLET}"
    ]


@pytest.mark.asyncio
async def test_helius_key_in_query(web3, upstream):
    await web3.execute_web3_endpoint("web3.helius.balances", {"address": "So1anaWallet"})

    assert upstream.urls() == ["https://api.helius.xyz/v0/addresses/So1anaWallet/balances?api-key=helius-key"]


@pytest.mark.asyncio
async def test_provider_error_status(web3, upstream):
    upstream.add("https://deep-index.moralis.io", status_code=401, json={"message": "Invalid key"})

    result = await web3.execute_web3_endpoint("web3.moralis.wallet_balance", {"address": WALLET})

    assert not result.success
    assert result.error.startswith("HTTP 401")


@pytest.mark.asyncio
async def test_flow_tolerates_optional_failure(web3, upstream):
    upstream.add(f"https://deep-index.moralis.io/api/v2.2/{WALLET}/erc20", status_code=500)

    result = await web3.execute_web3_flow("wallet-check", WALLET)

    assert result.ok
    assert not result.success
    assert result.message == "Executed 1/2 steps"
    assert [s.step for s in result.steps] == ["Get ETH Balance", "Get Token Balances"]
    assert result.to_response()["flowId"] == "wallet-check"


@pytest.mark.asyncio
async def test_flow_stops_on_required_failure(web3, upstream):
    upstream.add("https://deep-index.moralis.io", status_code=500)

    result = await web3.execute_web3_flow("web3-morning", WALLET)

    assert not result.ok
    assert len(result.steps) == 1


@pytest.mark.asyncio
async def test_unknown_flow_returns_none(web3):
    assert await web3.execute_web3_flow("nope", WALLET) is None


@pytest.mark.asyncio
async def test_demo_without_keys(test_settings, http_client):
    result = await Web3Executor(settings=test_settings, client=http_client).web3_demo()

    assert not result["success"]
    assert result["results"] == []
    assert result["address"] == DEMO_WALLET_ADDRESS


@pytest.mark.asyncio
async def test_demo_with_keys(web3):
    result = await web3.web3_demo(WALLET)

    assert result["success"]
    assert len(result["results"]) == 2
    assert result["message"] == "Executed 2/2 Web3 API calls"


def test_stats_and_listing(test_settings, http_client):
    executor = Web3Executor(settings=test_settings, client=http_client)

    stats = executor.get_stats()
    assert stats["totalEndpoints"] == len(WEB3_ENDPOINTS)
    assert stats["configured"] == {"moralis": False, "alchemy": False, "helius": False}
    assert all(e["hasApiKey"] is False for e in executor.list_endpoints())
    assert len(executor.list_flows()) == 6
