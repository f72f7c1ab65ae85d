import httpx
from common.config import Config
from common.logging import logger
from common.models import RetrievalResult, RetrievalSuccess, RetrievalError

QUERY_TEMPLATE = """{query}

Answer for Indian law in three parts:
1. Applicable laws, sections, and articles.
2. Similar legal precedents, each with case name, citation, a short summary, and notable differences.
3. A procedural checklist of steps to take."""


class CloudflareAutoRAG:
    def __init__(self):
        self.base_url = Config.CLOUDFLARE_BASE_URL
        self.account_id = Config.CLOUDFLARE_ACCOUNT_ID
        self.rag_name = Config.CLOUDFLARE_AUTORAG_NAME
        self.api_token = Config.CLOUDFLARE_API_TOKEN
        self.timeout = Config.AUTORAG_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.account_id and self.rag_name and self.api_token)

    def _search_url(self) -> str:
        return f"{self.base_url}accounts/{self.account_id}/autorag/rags/{self.rag_name}/ai-search"

    async def fetch(self, user_query: str) -> RetrievalResult:
        """Ask AutoRAG for an answer; never raises, errors come back as RetrievalError."""
        if not self.is_configured:
            logger.error("Cloudflare AutoRAG credentials are missing")
            return RetrievalError(message="Cloudflare AutoRAG is not configured.")

        headers = {"Authorization": f"Bearer {self.api_token}",
                   "Content-Type": "application/json"}
        payload = {"query": QUERY_TEMPLATE.format(query=user_query.strip())}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                res = await client.post(self._search_url(), json=payload, headers=headers)
            except httpx.HTTPError as e:
                logger.error(f"Cloudflare AutoRAG request error: {e}")
                return RetrievalError(message="Failed to reach Cloudflare AutoRAG.", details=str(e))

        try:
            data = res.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if res.status_code >= 400 or not data.get("success", False):
            logger.error(f"Cloudflare AutoRAG returned {res.status_code}: {data.get('errors')}")
            return RetrievalError(
                message=f"Cloudflare AutoRAG request failed with status {res.status_code}.",
                details=data.get("errors") or res.text[:500])

        result = data.get("result") or {}
        response = (result.get("response") or "") if isinstance(result, dict) else None
        if not isinstance(response, str):
            logger.error(f"Cloudflare AutoRAG returned an unexpected result: {res.text[:200]}")
            return RetrievalError(message="Unexpected response format from Cloudflare AutoRAG.",
                                  details=res.text[:500])
        return RetrievalSuccess(raw_text_response=response)


autorag_api = CloudflareAutoRAG()
