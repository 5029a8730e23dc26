"""
Chain-data provider extension - Moralis, Alchemy and Helius endpoints with
provider-specific request shaping
"""

import asyncio
import time
from typing import Any, Dict, List, Optional

import httpx
import structlog
from pydantic import BaseModel, Field

from meta_adapter.core.config import Settings, settings as default_settings
from meta_adapter.api.discovery.models import CamelModel, ParamSpec
from .executor import elapsed_ms, missing_required, substitute_params

logger = structlog.get_logger(__name__)

PROVIDERS = ("moralis", "alchemy", "helius")

PROVIDER_BASE_URLS = {
    "moralis": "https://deep-index.moralis.io/api/v2.2",
    "alchemy": "https://eth-mainnet.g.alchemy.com/nft/v3/{apiKey}",
    "helius": "https://api.helius.xyz/v0",
}
ALCHEMY_RPC_URL = "https://eth-mainnet.g.alchemy.com/v2/{apiKey}"

DEMO_WALLET_ADDRESS = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


class Web3Endpoint(CamelModel):
    key: str
    name: str
    description: str
    provider: str
    method: str = "GET"
    path: str
    params: Dict[str, ParamSpec] = Field(default_factory=dict)
    sample_phrases: List[str] = Field(default_factory=list)

    @property
    def required_args(self) -> List[str]:
        return [name for name, spec in self.params.items() if spec.required]


def _required(description: str = "Wallet address (0x...)") -> ParamSpec:
    return ParamSpec(type="string", required=True, description=description)


CHAIN_PARAM = ParamSpec(type="string", required=False, description="Chain ID (eth, polygon, base)")

WEB3_ENDPOINTS: List[Web3Endpoint] = [
    Web3Endpoint(
        key="web3.moralis.wallet_balance",
        name="Get Wallet Balance",
        description="Get native token balance for a wallet address",
        provider="moralis",
        path="/{address}/balance?chain={chain}",
        params={"address": _required(), "chain": CHAIN_PARAM},
        sample_phrases=["check my wallet balance", "what is my ETH balance", "wallet balance"],
    ),
    Web3Endpoint(
        key="web3.moralis.token_balances",
        name="Get Token Balances",
        description="Get all ERC20 token balances for a wallet",
        provider="moralis",
        path="/{address}/erc20?chain={chain}",
        params={"address": _required(), "chain": CHAIN_PARAM},
        sample_phrases=["show my tokens", "what tokens do I have", "token balances"],
    ),
    Web3Endpoint(
        key="web3.moralis.nfts",
        name="Get NFTs",
        description="Get all NFTs owned by a wallet address",
        provider="moralis",
        path="/{address}/nft?chain={chain}",
        params={"address": _required(), "chain": CHAIN_PARAM},
        sample_phrases=["show my NFTs", "what NFTs do I own", "my NFT collection"],
    ),
    Web3Endpoint(
        key="web3.moralis.transactions",
        name="Get Transaction History",
        description="Get transaction history for a wallet",
        provider="moralis",
        path="/{address}?chain={chain}",
        params={"address": _required(), "chain": CHAIN_PARAM},
        sample_phrases=["show my transactions", "transaction history", "recent transactions"],
    ),
    Web3Endpoint(
        key="web3.moralis.token_price",
        name="Get Token Price",
        description="Get current price of an ERC20 token",
        provider="moralis",
        path="/erc20/{address}/price?chain={chain}",
        params={"address": _required("Token contract address"), "chain": CHAIN_PARAM},
        sample_phrases=["token price", "what is the price of", "check token price"],
    ),
    Web3Endpoint(
        key="web3.alchemy.nft_ownership",
        name="Get NFTs for Owner",
        description="Get all NFTs owned by an address via Alchemy",
        provider="alchemy",
        path="/getNFTsForOwner?owner={address}",
        params={"address": _required()},
        sample_phrases=["alchemy NFTs", "get my NFTs from alchemy"],
    ),
    Web3Endpoint(
        key="web3.alchemy.nft_floor_price",
        name="Get NFT Floor Price",
        description="Get floor price for an NFT collection",
        provider="alchemy",
        path="/getFloorPrice?contractAddress={contract}",
        params={"contract": _required("NFT contract address")},
        sample_phrases=["NFT floor price", "collection floor price", "what is the floor"],
    ),
    Web3Endpoint(
        key="web3.alchemy.token_balances",
        name="Get Token Balances (Alchemy)",
        description="Get all token balances via Alchemy",
        provider="alchemy",
        method="POST",
        path="/",
        params={"address": _required()},
        sample_phrases=["alchemy token balances", "check tokens alchemy"],
    ),
    Web3Endpoint(
        key="web3.alchemy.gas_price",
        name="Get Gas Price",
        description="Get current gas price estimates",
        provider="alchemy",
        method="POST",
        path="/",
        sample_phrases=["gas price", "what is gas", "current gas fees", "ethereum gas"],
    ),
    Web3Endpoint(
        key="web3.helius.balances",
        name="Get Solana Balances",
        description="Get token balances for a Solana wallet",
        provider="helius",
        path="/addresses/{address}/balances?api-key={apiKey}",
        params={"address": _required("Solana wallet address")},
        sample_phrases=["solana balance", "my SOL", "solana tokens"],
    ),
    Web3Endpoint(
        key="web3.helius.transactions",
        name="Get Solana Transactions",
        description="Get transaction history for a Solana wallet",
        provider="helius",
        path="/addresses/{address}/transactions?api-key={apiKey}",
        params={"address": _required("Solana wallet address")},
        sample_phrases=["solana transactions", "SOL history", "solana activity"],
    ),
    Web3Endpoint(
        key="web3.helius.nfts",
        name="Get Solana NFTs",
        description="Get NFTs owned by a Solana wallet",
        provider="helius",
        path="/addresses/{address}/nfts?api-key={apiKey}",
        params={"address": _required("Solana wallet address")},
        sample_phrases=["solana NFTs", "my SOL NFTs", "solana collection"],
    ),
]


class Web3FlowStep(BaseModel):
    key: str
    name: str
    provider: str
    optional: bool = False


class Web3Flow(BaseModel):
    id: str
    name: str
    description: str
    steps: List[Web3FlowStep]
    categories: List[str] = Field(default_factory=lambda: ["Web3"])


WEB3_FLOW_TEMPLATES: List[Web3Flow] = [
    Web3Flow(
        id="wallet-check",
        name="Wallet Check",
        description="Check wallet balance and token holdings",
        steps=[
            Web3FlowStep(key="web3.moralis.wallet_balance", name="Get ETH Balance", provider="moralis"),
            Web3FlowStep(key="web3.moralis.token_balances", name="Get Token Balances", provider="moralis", optional=True),
        ],
    ),
    Web3Flow(
        id="portfolio-brief",
        name="Portfolio Brief",
        description="Complete portfolio overview with balances and prices",
        steps=[
            Web3FlowStep(key="web3.moralis.wallet_balance", name="Get ETH Balance", provider="moralis"),
            Web3FlowStep(key="web3.moralis.token_balances", name="Get Token Balances", provider="moralis", optional=True),
            Web3FlowStep(key="web3.alchemy.gas_price", name="Current Gas Price", provider="alchemy", optional=True),
        ],
        categories=["Web3", "Cryptocurrency"],
    ),
    Web3Flow(
        id="nft-explorer",
        name="NFT Explorer",
        description="Explore NFTs owned by a wallet",
        steps=[
            Web3FlowStep(key="web3.moralis.nfts", name="Get NFTs (Moralis)", provider="moralis"),
            Web3FlowStep(key="web3.alchemy.nft_ownership", name="Get NFTs (Alchemy)", provider="alchemy", optional=True),
        ],
    ),
    Web3Flow(
        id="web3-morning",
        name="Web3 Morning Brief",
        description="Start your day with wallet status and gas prices",
        steps=[
            Web3FlowStep(key="web3.moralis.wallet_balance", name="Check Balance", provider="moralis"),
            Web3FlowStep(key="web3.alchemy.gas_price", name="Gas Prices", provider="alchemy"),
        ],
    ),
    Web3Flow(
        id="solana-check",
        name="Solana Wallet Check",
        description="Check Solana wallet balances and NFTs",
        steps=[
            Web3FlowStep(key="web3.helius.balances", name="SOL Balances", provider="helius"),
            Web3FlowStep(key="web3.helius.nfts", name="Solana NFTs", provider="helius", optional=True),
        ],
    ),
    Web3Flow(
        id="multi-chain",
        name="Multi-Chain Overview",
        description="Check balances across Ethereum and Solana",
        steps=[
            Web3FlowStep(key="web3.moralis.wallet_balance", name="ETH Balance", provider="moralis"),
            Web3FlowStep(key="web3.helius.balances", name="SOL Balance", provider="helius", optional=True),
            Web3FlowStep(key="web3.alchemy.gas_price", name="ETH Gas", provider="alchemy", optional=True),
        ],
    ),
]


class Web3ExecutionResult(CamelModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    duration_ms: int = 0
    provider: str
    endpoint: str
    chain: Optional[str] = None
    step: Optional[str] = None
    missing_params: List[str] = Field(default_factory=list)


class Web3FlowExecutionResult(CamelModel):
    ok: bool
    success: bool
    flow_id: str
    flow_name: str
    address: str
    chain: str
    steps: List[Web3ExecutionResult] = Field(default_factory=list)
    message: str
    duration_ms: int = 0


class Web3Executor:
    """Executes chain-data provider endpoints with per-provider credentials"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        self.settings = settings or default_settings
        self.timeout = timeout or self.settings.REQUEST_TIMEOUT
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.timeout,
            limits=httpx.Limits(max_connections=self.settings.MAX_CONCURRENT_REQUESTS)
        )
        self.endpoints: Dict[str, Web3Endpoint] = {e.key: e for e in WEB3_ENDPOINTS}
        self.flows: Dict[str, Web3Flow] = {f.id: f for f in WEB3_FLOW_TEMPLATES}

    def api_key(self, provider: str) -> Optional[str]:
        return self.settings.get_provider_api_key(provider)

    def headers(self, provider: str, api_key: str) -> Dict[str, str]:
        headers = {
            "User-Agent": self.settings.USER_AGENT,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if provider == "moralis":
            headers["X-API-Key"] = api_key
        return headers

    def build_request(
        self,
        endpoint: Web3Endpoint,
        api_key: str,
        params: Dict[str, Any],
        chain: str
    ) -> Dict[str, Any]:
        """Shape method, URL and body for the endpoint's provider"""
        if endpoint.provider == "alchemy" and endpoint.method == "POST":
            if endpoint.key.endswith("gas_price"):
                body = {"jsonrpc": "2.0", "method": "eth_gasPrice", "params": [], "id": 1}
            else:
                body = {
                    "jsonrpc": "2.0",
                    "method": "alchemy_getTokenBalances",
                    "params": [params.get("address"), "erc20"],
                    "id": 1,
                }
            return {
                "method": "POST",
                "url": substitute_params(ALCHEMY_RPC_URL, {"apiKey": api_key}),
                "json": body,
            }

        values = {**params, "chain": chain, "apiKey": api_key}
        base_url = substitute_params(PROVIDER_BASE_URLS[endpoint.provider], values)
        request = {
            "method": endpoint.method,
            "url": f"{base_url}{substitute_params(endpoint.path, values)}",
        }
        if endpoint.method == "POST":
            request["json"] = params
        return request

    async def execute_web3_endpoint(self, key: str, params: Optional[Dict[str, Any]] = None) -> Web3ExecutionResult:
        """
        Execute a chain-data endpoint

        Args:
            key: Endpoint key (web3.<provider>.<op>)
            params: Endpoint params; ``chain`` defaults to the configured chain

        Returns:
            Web3ExecutionResult; failures are captured, never raised
        """
        start = time.perf_counter()
        params = dict(params or {})

        endpoint = self.endpoints.get(key)
        if endpoint is None:
            return Web3ExecutionResult(
                success=False,
                error=f"Web3 endpoint not found: {key}",
                duration_ms=elapsed_ms(start),
                provider="unknown",
                endpoint=key,
            )

        api_key = self.api_key(endpoint.provider)
        if not api_key:
            return Web3ExecutionResult(
                success=False,
                error=f"API key not configured for {endpoint.provider}",
                duration_ms=elapsed_ms(start),
                provider=endpoint.provider,
                endpoint=endpoint.name,
            )

        missing = missing_required(endpoint.required_args, params)
        if missing:
            return Web3ExecutionResult(
                success=False,
                error=f"Missing required parameters: {', '.join(missing)}",
                duration_ms=elapsed_ms(start),
                provider=endpoint.provider,
                endpoint=endpoint.name,
                missing_params=missing,
            )

        chain = params.get("chain") or self.settings.DEFAULT_CHAIN
        request = self.build_request(endpoint, api_key, params, chain)

        try:
            response = await asyncio.wait_for(
                self.client.request(headers=self.headers(endpoint.provider, api_key), **request),
                timeout=self.timeout
            )
            if not response.is_success:
                error = f"HTTP {response.status_code}: {response.text[:200]}"
            else:
                return Web3ExecutionResult(
                    success=True,
                    data=response.json(),
                    duration_ms=elapsed_ms(start),
                    provider=endpoint.provider,
                    endpoint=endpoint.name,
                    chain=chain,
                )

        except asyncio.TimeoutError:
            error = f"Request timed out after {self.timeout}s"
        except httpx.HTTPError as e:
            error = f"{e.__class__.__name__}: {e}"
        except ValueError as e:
            error = f"Invalid response body: {e}"

        logger.warning("Web3 endpoint execution failed", key=key, provider=endpoint.provider, error=error)
        return Web3ExecutionResult(
            success=False,
            error=error,
            duration_ms=elapsed_ms(start),
            provider=endpoint.provider,
            endpoint=endpoint.name,
        )

    def get_flow(self, flow_id: str) -> Optional[Web3Flow]:
        return self.flows.get(flow_id)

    def list_flows(self) -> List[Web3Flow]:
        return list(self.flows.values())

    async def execute_web3_flow(
        self,
        flow_id: str,
        address: str,
        chain: Optional[str] = None
    ) -> Optional[Web3FlowExecutionResult]:
        """Run a web3 flow sequentially for one wallet; None when the flow is unknown"""
        flow = self.get_flow(flow_id)
        if flow is None:
            return None

        start = time.perf_counter()
        chain = chain or self.settings.DEFAULT_CHAIN
        results: List[Web3ExecutionResult] = []

        for step in flow.steps:
            result = await self.execute_web3_endpoint(step.key, {"address": address, "chain": chain})
            result.step = step.name
            results.append(result)
            if not result.success and not step.optional:
                break

        succeeded = sum(1 for r in results if r.success)
        logger.info("Web3 flow executed", flow_id=flow_id, steps=len(results), succeeded=succeeded)

        return Web3FlowExecutionResult(
            ok=succeeded > 0,
            success=succeeded == len(results),
            flow_id=flow.id,
            flow_name=flow.name,
            address=address,
            chain=chain,
            steps=results,
            message=f"Executed {succeeded}/{len(results)} steps",
            duration_ms=elapsed_ms(start),
        )

    async def web3_demo(self, address: Optional[str] = None) -> Dict[str, Any]:
        """Wallet balance and gas price for whichever providers are configured"""
        start = time.perf_counter()
        address = address or DEMO_WALLET_ADDRESS
        results = []

        if self.api_key("moralis"):
            results.append(await self.execute_web3_endpoint(
                "web3.moralis.wallet_balance",
                {"address": address, "chain": self.settings.DEFAULT_CHAIN}
            ))
        if self.api_key("alchemy"):
            results.append(await self.execute_web3_endpoint("web3.alchemy.gas_price"))

        succeeded = sum(1 for r in results if r.success)
        return {
            "success": succeeded > 0,
            "address": address,
            "message": f"Executed {succeeded}/{len(results)} Web3 API calls",
            "results": [r.to_response() for r in results],
            "durationMs": elapsed_ms(start),
        }

    def list_endpoints(self) -> List[Dict[str, Any]]:
        listed = []
        for endpoint in self.endpoints.values():
            entry = endpoint.to_response()
            entry["hasApiKey"] = self.api_key(endpoint.provider) is not None
            listed.append(entry)
        return listed

    def get_stats(self) -> Dict[str, Any]:
        by_provider: Dict[str, int] = {}
        for endpoint in self.endpoints.values():
            by_provider[endpoint.provider] = by_provider.get(endpoint.provider, 0) + 1

        return {
            "totalEndpoints": len(self.endpoints),
            "byProvider": by_provider,
            "configured": {p: self.api_key(p) is not None for p in PROVIDERS},
        }

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
