"""
Semantic search over the catalog through a generative model.

The model gets the user's query plus a JSON projection of every item and is
asked for a structured reply: a JSON object with a single "itemIds" array of
strings. Every failure mode (transport, HTTP status, malformed reply, missing
field) surfaces as SemanticSearchError.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from catalog_browser.io.exceptions import SemanticSearchError
from catalog_browser.protocols.catalog_config import CatalogConfig, get_catalog_config
from .catalog_types import SearchCandidate

logger = logging.getLogger(__name__)

RESULT_FIELD = "itemIds"

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        RESULT_FIELD: {
            "type": "array",
            "items": {"type": "string"},
        },
    },
    "required": [RESULT_FIELD],
}

PROMPT_TEMPLATE = """You are an intelligent search assistant for a content dashboard.
You are given a user's search query and a list of all available items.
Each item has an ID, a title, and a category.

Decide which items are the most relevant matches for the query.
The query might be a simple keyword or a natural language question
(e.g., "what are the newest tools for productivity?").

User Query: {query}

Available Items (JSON):
{items}

Return a JSON object containing a single key "{field}" whose value is an
array of strings, each string being the ID of a matching item.
If no items match the query, return an empty array.
"""


def build_search_prompt(query: str, candidates: Sequence[SearchCandidate]) -> str:
    """Render the prompt for a query and its item context."""
    items_json = json.dumps([candidate.to_dict() for candidate in candidates], ensure_ascii=False)
    return PROMPT_TEMPLATE.format(query=json.dumps(query, ensure_ascii=False),
                                  items=items_json, field=RESULT_FIELD)


def parse_item_ids(reply_text: str) -> List[str]:
    """
    Parse a structured reply into item identifiers.

    Raises:
        SemanticSearchError: If the reply is not a JSON object with a list of strings under "itemIds"
    """
    try:
        payload = json.loads(reply_text)
    except (TypeError, ValueError) as e:
        raise SemanticSearchError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(payload, dict) or RESULT_FIELD not in payload:
        raise SemanticSearchError(f"Reply is missing the '{RESULT_FIELD}' field")

    item_ids = payload[RESULT_FIELD]
    if not isinstance(item_ids, list) or not all(isinstance(i, str) for i in item_ids):
        raise SemanticSearchError(f"'{RESULT_FIELD}' must be an array of strings")
    return item_ids


class GenerativeSemanticSearchService:
    """
    Semantic search backed by an Ollama-compatible /api/generate endpoint.

    Usage:
        service = GenerativeSemanticSearchService(model="llama3.1")
        register_semantic_search_service(service)
    """

    def __init__(self,
                 api_endpoint: Optional[str] = None,
                 model: Optional[str] = None,
                 timeout_s: Optional[float] = None,
                 session: Optional[requests.Session] = None,
                 config: Optional[CatalogConfig] = None):
        config = config or get_catalog_config()
        self.api_endpoint = api_endpoint or config.semantic_endpoint
        self.model = model or config.semantic_model
        self.timeout_s = timeout_s if timeout_s is not None else config.semantic_timeout_s
        self._session = session or requests.Session()

    def find_matching_item_ids(self, query: str, candidates: Sequence[SearchCandidate]) -> List[str]:
        payload = {
            "model": self.model,
            "prompt": build_search_prompt(query, candidates),
            "stream": False,
            "format": RESPONSE_SCHEMA,
        }
        logger.info(f"Semantic search for {query!r} over {len(candidates)} items ({self.model})")

        try:
            response = self._session.post(self.api_endpoint, json=payload, timeout=self.timeout_s)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise SemanticSearchError(f"Semantic search request failed: {e}") from e
        except ValueError as e:
            raise SemanticSearchError(f"Service returned a non-JSON body: {e}") from e

        if not isinstance(body, dict) or "response" not in body:
            raise SemanticSearchError("Service reply has no 'response' text")

        item_ids = parse_item_ids(body["response"])
        logger.info(f"Semantic search matched {len(item_ids)} items")
        return item_ids
