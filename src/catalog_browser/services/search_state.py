"""
Search state and its transition function.

All changes to the search inputs go through apply_user_action(), which maps
(state, action) to a new immutable state. Every action type has a defined
effect from every state:

- EDIT_QUERY / SELECT_CATEGORY update the lexical input and drop any resolved
  semantic set, so the catalog immediately follows the lexical filter again.
  If a semantic request is in flight it is superseded.
- SUBMIT_SEMANTIC starts a request when the query is non-blank and none is in
  flight; otherwise the state is returned unchanged.
- SEMANTIC_RESOLVED / SEMANTIC_FAILED finish the in-flight request. A reply
  for a superseded request only clears the searching flag.
- CLEAR_SEARCH resets query, category and semantic set together.
"""

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Hashable, Iterable, Optional, Tuple

from .enum_dispatch_service import EnumDispatchService

logger = logging.getLogger(__name__)


class SearchMode(Enum):
    LEXICAL = "lexical"
    SEMANTIC = "semantic"


class SearchActionType(Enum):
    EDIT_QUERY = "edit_query"
    SELECT_CATEGORY = "select_category"
    SUBMIT_SEMANTIC = "submit_semantic"
    SEMANTIC_RESOLVED = "semantic_resolved"
    SEMANTIC_FAILED = "semantic_failed"
    CLEAR_SEARCH = "clear_search"


@dataclass(frozen=True)
class SearchState:
    """
    Immutable search inputs for one catalog view.

    Attributes:
        query_text: Text typed by the user, used for lexical matching and as the semantic query
        category_id: Selected category identifier; empty means all categories
        semantic_ids: Resolved semantic set, None while no semantic result applies
        searching: A semantic request is in flight
        request_id: Identifier of the latest submitted semantic request
        semantic_failed: The latest semantic request failed and the filter reverted to lexical
    """
    query_text: str = ""
    category_id: str = ""
    semantic_ids: Optional[FrozenSet[str]] = None
    searching: bool = False
    request_id: int = 0
    semantic_failed: bool = False

    @property
    def mode(self) -> SearchMode:
        return SearchMode.LEXICAL if self.semantic_ids is None else SearchMode.SEMANTIC

    @property
    def highlight_term(self) -> str:
        """Literal term to highlight; semantic matches have no single literal term."""
        return self.query_text if self.mode is SearchMode.LEXICAL else ""

    @property
    def filter_key(self) -> Hashable:
        """Value-comparable identity of the inputs that determine the filtered result."""
        return (self.query_text, self.category_id, self.semantic_ids)

    @property
    def can_submit(self) -> bool:
        return not self.searching and bool(self.query_text.strip())


@dataclass(frozen=True)
class SearchAction:
    """A user action or request outcome applied to a SearchState."""
    type: SearchActionType
    text: str = ""
    category_id: str = ""
    item_ids: Tuple[str, ...] = ()
    request_id: int = 0

    @classmethod
    def edit_query(cls, text: str) -> "SearchAction":
        return cls(SearchActionType.EDIT_QUERY, text=text)

    @classmethod
    def select_category(cls, category_id: str) -> "SearchAction":
        return cls(SearchActionType.SELECT_CATEGORY, category_id=category_id)

    @classmethod
    def submit_semantic(cls) -> "SearchAction":
        return cls(SearchActionType.SUBMIT_SEMANTIC)

    @classmethod
    def semantic_resolved(cls, request_id: int, item_ids: Iterable[str]) -> "SearchAction":
        return cls(SearchActionType.SEMANTIC_RESOLVED, item_ids=tuple(item_ids), request_id=request_id)

    @classmethod
    def semantic_failed(cls, request_id: int) -> "SearchAction":
        return cls(SearchActionType.SEMANTIC_FAILED, request_id=request_id)

    @classmethod
    def clear_search(cls) -> "SearchAction":
        return cls(SearchActionType.CLEAR_SEARCH)


class SearchStateMachine(EnumDispatchService[SearchActionType]):
    """Dispatches each action type to its transition handler."""

    strategy_enum = SearchActionType

    def __init__(self):
        super().__init__()
        self._register_handlers({
            SearchActionType.EDIT_QUERY: self._edit_query,
            SearchActionType.SELECT_CATEGORY: self._select_category,
            SearchActionType.SUBMIT_SEMANTIC: self._submit_semantic,
            SearchActionType.SEMANTIC_RESOLVED: self._semantic_resolved,
            SearchActionType.SEMANTIC_FAILED: self._semantic_failed,
            SearchActionType.CLEAR_SEARCH: self._clear_search,
        })

    def _determine_strategy(self, state: SearchState, action: SearchAction) -> SearchActionType:
        return action.type

    @staticmethod
    def _superseded_request_id(state: SearchState) -> int:
        # A new id makes the in-flight reply unrecognisable when it arrives
        return state.request_id + 1 if state.searching else state.request_id

    def _edit_query(self, state: SearchState, action: SearchAction) -> SearchState:
        return dataclasses.replace(
            state,
            query_text=action.text,
            semantic_ids=None,
            semantic_failed=False,
            request_id=self._superseded_request_id(state),
        )

    def _select_category(self, state: SearchState, action: SearchAction) -> SearchState:
        return dataclasses.replace(
            state,
            category_id=action.category_id,
            semantic_ids=None,
            semantic_failed=False,
            request_id=self._superseded_request_id(state),
        )

    def _submit_semantic(self, state: SearchState, action: SearchAction) -> SearchState:
        if not state.can_submit:
            return state
        return dataclasses.replace(
            state,
            semantic_ids=None,
            searching=True,
            semantic_failed=False,
            request_id=state.request_id + 1,
        )

    def _semantic_resolved(self, state: SearchState, action: SearchAction) -> SearchState:
        if not state.searching:
            return state
        if action.request_id != state.request_id:
            logger.debug(f"Dropping superseded semantic result for request {action.request_id}")
            return dataclasses.replace(state, searching=False)
        return dataclasses.replace(
            state,
            semantic_ids=frozenset(action.item_ids),
            searching=False,
            semantic_failed=False,
        )

    def _semantic_failed(self, state: SearchState, action: SearchAction) -> SearchState:
        if not state.searching:
            return state
        if action.request_id != state.request_id:
            return dataclasses.replace(state, searching=False)
        return dataclasses.replace(state, semantic_ids=None, searching=False, semantic_failed=True)

    def _clear_search(self, state: SearchState, action: SearchAction) -> SearchState:
        return SearchState(
            searching=state.searching,
            request_id=self._superseded_request_id(state),
        )


_state_machine = SearchStateMachine()


def apply_user_action(state: SearchState, action: SearchAction) -> SearchState:
    """Return the state that results from applying action to state."""
    new_state = _state_machine.dispatch(state, action)
    if new_state != state:
        logger.debug(f"{action.type.value}: {state} -> {new_state}")
    return new_state
