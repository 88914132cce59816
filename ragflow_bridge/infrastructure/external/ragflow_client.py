"""Async client for the RAGFlow HTTP API"""

from typing import Any, Dict, List, Optional, Tuple
import httpx
import logging

from shared.config.settings import RAGFlowInstance
from ...domain.exceptions import RAGFlowApiError

logger = logging.getLogger(__name__)

# (filename, content, mime type)
FileTuple = Tuple[str, bytes, str]


class RAGFlowClient:
    """Client for a single RAGFlow instance.

    Every call unwraps the ``{"code": 0, "data": ...}`` envelope and returns
    ``data``; a non-zero ``code`` or a transport failure raises
    :class:`RAGFlowApiError`. OpenAI compatible endpoints answer without the
    envelope, so those calls pass ``unwrap=False`` and get the raw payload.
    """

    def __init__(self, instance: RAGFlowInstance, http_client: Optional[httpx.AsyncClient] = None):
        self.instance = instance
        self.base_url = f"{instance.api_url.rstrip('/')}/api/v1"
        self.client = http_client or httpx.AsyncClient(timeout=instance.timeout)
        self._headers = {"Authorization": f"Bearer {instance.api_key}"}

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[List[Tuple[str, FileTuple]]] = None,
        unwrap: bool = True
    ) -> Any:
        url = f"{self.base_url}{path}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        logger.info(f"RAGFlow request: {method} {path}")

        try:
            response = await self.client.request(
                method,
                url,
                json=json_data,
                params=params,
                files=files,
                headers=self._headers
            )
        except httpx.TimeoutException as e:
            logger.error(f"RAGFlow request timed out: {method} {path}")
            raise RAGFlowApiError(f"Request to RAGFlow timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"RAGFlow request failed: {method} {path}: {e}")
            raise RAGFlowApiError(f"Request to RAGFlow failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise RAGFlowApiError(
                f"Invalid JSON response: {e}",
                details={"status_code": response.status_code, "body": response.text[:500]}
            ) from e

        if not isinstance(payload, dict):
            raise RAGFlowApiError("Invalid response format", details=payload)

        if not unwrap and "code" not in payload:
            return payload

        code = payload.get("code")
        if code != 0:
            message = payload.get("message")
            if not isinstance(message, str) or not message:
                message = "API request failed"
            logger.error(f"RAGFlow error on {method} {path}: {message} (code {code})")
            raise RAGFlowApiError(message, code=code if isinstance(code, int) else None, details=payload)

        return payload.get("data") if unwrap else payload

    # Health

    async def health_check(self) -> Any:
        """Check the instance answers authenticated requests."""
        return await self.list_datasets(page=1, page_size=1)

    # Datasets

    async def create_dataset(
        self,
        name: str,
        description: Optional[str] = None,
        chunk_method: Optional[str] = None,
        embedding_model: Optional[str] = None,
        **options: Any
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name}
        if description:
            payload["description"] = description
        if chunk_method:
            payload["chunk_method"] = chunk_method
        if embedding_model:
            payload["embedding_model"] = embedding_model
        payload.update({key: value for key, value in options.items() if value is not None})

        return await self._request("POST", "/datasets", json_data=payload) or {}

    async def list_datasets(
        self,
        page: int = 1,
        page_size: int = 30,
        orderby: Optional[str] = None,
        desc: Optional[bool] = None,
        name: Optional[str] = None,
        id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params = {"page": page, "page_size": page_size, "orderby": orderby, "name": name, "id": id}
        if desc is not None:
            params["desc"] = "true" if desc else "false"

        return await self._request("GET", "/datasets", params=params) or []

    async def update_dataset(self, dataset_id: str, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", f"/datasets/{dataset_id}", json_data=data)

    async def delete_datasets(self, ids: List[str]) -> Any:
        return await self._request("DELETE", "/datasets", json_data={"ids": ids})

    async def get_knowledge_graph(self, dataset_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/datasets/{dataset_id}/knowledge_graph") or {}

    # Documents

    async def upload_documents(self, dataset_id: str, files: List[FileTuple]) -> List[Dict[str, Any]]:
        """Upload files as multipart ``file`` parts."""
        parts = [("file", upload) for upload in files]
        return await self._request("POST", f"/datasets/{dataset_id}/documents", files=parts) or []

    async def list_documents(
        self,
        dataset_id: str,
        page: int = 1,
        page_size: int = 30,
        orderby: Optional[str] = None,
        desc: Optional[bool] = None,
        id: Optional[str] = None,
        name: Optional[str] = None
    ) -> Dict[str, Any]:
        params = {"page": page, "page_size": page_size, "orderby": orderby, "id": id, "name": name}
        if desc is not None:
            params["desc"] = "true" if desc else "false"

        return await self._request("GET", f"/datasets/{dataset_id}/documents", params=params) or {}

    async def delete_documents(self, dataset_id: str, ids: List[str]) -> Any:
        return await self._request("DELETE", f"/datasets/{dataset_id}/documents", json_data={"ids": ids})

    async def parse_documents(self, dataset_id: str, document_ids: List[str]) -> Any:
        return await self._request(
            "POST", f"/datasets/{dataset_id}/chunks", json_data={"document_ids": document_ids}
        )

    async def stop_parsing(self, dataset_id: str, document_ids: List[str]) -> Any:
        return await self._request(
            "DELETE", f"/datasets/{dataset_id}/chunks", json_data={"document_ids": document_ids}
        )

    async def get_parse_status(self, dataset_id: str, document_id: str) -> Dict[str, Any]:
        """Return the RAGFlow document entry, which carries run and progress."""
        data = await self.list_documents(dataset_id, page=1, page_size=1, id=document_id)
        docs = data.get("docs") or []
        if not docs:
            raise RAGFlowApiError(f"Document {document_id} not found in dataset {dataset_id}")
        return docs[0]

    # Chunks

    async def add_chunk(
        self,
        dataset_id: str,
        document_id: str,
        content: str,
        important_keywords: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"content": content}
        if important_keywords:
            payload["important_keywords"] = important_keywords

        return await self._request(
            "POST", f"/datasets/{dataset_id}/documents/{document_id}/chunks", json_data=payload
        ) or {}

    async def list_chunks(
        self,
        dataset_id: str,
        document_id: str,
        page: int = 1,
        page_size: int = 30,
        keywords: Optional[str] = None,
        id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Return ``{"chunks": [...], "total": n, "doc": {...}}`` for one document."""
        params = {"page": page, "page_size": page_size, "keywords": keywords, "id": id}
        return await self._request(
            "GET", f"/datasets/{dataset_id}/documents/{document_id}/chunks", params=params
        ) or {}

    async def update_chunk(self, dataset_id: str, document_id: str, chunk_id: str, data: Dict[str, Any]) -> Any:
        return await self._request(
            "PUT", f"/datasets/{dataset_id}/documents/{document_id}/chunks/{chunk_id}", json_data=data
        )

    async def delete_chunks(self, dataset_id: str, document_id: str, chunk_ids: List[str]) -> Any:
        return await self._request(
            "DELETE",
            f"/datasets/{dataset_id}/documents/{document_id}/chunks",
            json_data={"chunk_ids": chunk_ids}
        )

    async def retrieve(self, question: str, dataset_ids: List[str], **options: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"question": question, "dataset_ids": dataset_ids}
        payload.update({key: value for key, value in options.items() if value is not None})

        return await self._request("POST", "/retrieval", json_data=payload) or {}

    # Chat assistants

    async def create_chat(self, name: str, dataset_ids: Optional[List[str]] = None, **options: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name}
        if dataset_ids:
            payload["dataset_ids"] = dataset_ids
        payload.update(options)

        return await self._request("POST", "/chats", json_data=payload) or {}

    async def list_chats(
        self,
        page: int = 1,
        page_size: int = 30,
        orderby: Optional[str] = None,
        desc: Optional[bool] = None,
        name: Optional[str] = None,
        id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params = {"page": page, "page_size": page_size, "orderby": orderby, "name": name, "id": id}
        if desc is not None:
            params["desc"] = "true" if desc else "false"

        return await self._request("GET", "/chats", params=params) or []

    async def update_chat(self, chat_id: str, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", f"/chats/{chat_id}", json_data=data)

    async def delete_chats(self, ids: List[str]) -> Any:
        return await self._request("DELETE", "/chats", json_data={"ids": ids})

    # Sessions

    async def create_session(self, chat_id: str, name: str = "New session", **options: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name}
        payload.update(options)

        return await self._request("POST", f"/chats/{chat_id}/sessions", json_data=payload) or {}

    async def list_sessions(
        self,
        chat_id: str,
        page: int = 1,
        page_size: int = 30,
        id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params = {"page": page, "page_size": page_size, "id": id}
        return await self._request("GET", f"/chats/{chat_id}/sessions", params=params) or []

    async def send_message(self, chat_id: str, question: str, **options: Any) -> Dict[str, Any]:
        """Ask a question; responses are requested without streaming."""
        payload: Dict[str, Any] = {"question": question, "stream": False}
        payload.update(options)

        return await self._request("POST", f"/chats/{chat_id}/completions", json_data=payload) or {}

    async def openai_chat_completion(
        self,
        chat_id: str,
        model: str,
        messages: List[Dict[str, Any]],
        stream: bool = False,
        **options: Any
    ) -> Dict[str, Any]:
        """Call the OpenAI compatible completion endpoint and return its raw body."""
        payload: Dict[str, Any] = {"model": model, "messages": messages, "stream": stream}
        payload.update(options)

        return await self._request(
            "POST", f"/chats_openai/{chat_id}/chat/completions", json_data=payload, unwrap=False
        )

    # Agents

    async def create_agent(self, title: str, dsl: Dict[str, Any], description: Optional[str] = None) -> Any:
        payload: Dict[str, Any] = {"title": title, "dsl": dsl}
        if description:
            payload["description"] = description

        return await self._request("POST", "/agents", json_data=payload)

    async def list_agents(
        self,
        page: int = 1,
        page_size: int = 30,
        orderby: Optional[str] = None,
        desc: Optional[bool] = None,
        id: Optional[str] = None,
        title: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params = {"page": page, "page_size": page_size, "orderby": orderby, "id": id, "title": title}
        if desc is not None:
            params["desc"] = "true" if desc else "false"

        return await self._request("GET", "/agents", params=params) or []

    async def update_agent(self, agent_id: str, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", f"/agents/{agent_id}", json_data=data)

    async def delete_agent(self, agent_id: str) -> Any:
        return await self._request("DELETE", f"/agents/{agent_id}")


def create_ragflow_client(instance: RAGFlowInstance) -> RAGFlowClient:
    """Create a client for the given instance."""
    logger.debug(f"Creating RAGFlow client for instance {instance.name} at {instance.api_url}")
    return RAGFlowClient(instance)
