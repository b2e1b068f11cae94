"""
Recommendation Pipeline — LangGraph graph for gift recommendations.

Chains the recommendation nodes into an executable graph:
1. retrieve_candidates — Load budget-eligible gifts from the catalog
2. personalize — Score and rank them against the recipient context

A conditional edge short-circuits to END when the catalog returns
nothing for the requested budget.
"""

import logging
from typing import Any

from langgraph.graph import END, START, StateGraph

from giftly.agents.scoring import personalize
from giftly.agents.state import RecommendationState
from giftly.services.gift_loader import load_candidate_gifts

logger = logging.getLogger(__name__)


# ======================================================================
# Nodes
# ======================================================================

async def retrieve_candidates(state: RecommendationState) -> dict[str, Any]:
    """
    LangGraph node: load the candidate gifts for this request.

    Sets ``error`` when no gift fits the budget.
    """
    candidates = await load_candidate_gifts(budget=state.budget)

    result: dict[str, Any] = {"candidates": candidates}
    if not candidates:
        result["error"] = "No gifts found for this budget — try raising it"
        logger.warning("No candidate gifts found (budget=%s)", state.budget)
    return result


def _check_after_retrieval(state: RecommendationState) -> str:
    """Route after retrieve_candidates: END when there is nothing to score."""
    if not state.candidates:
        logger.warning("Pipeline short-circuit: no candidates after retrieval")
        return "error"
    return "continue"


# ======================================================================
# Graph construction
# ======================================================================

def build_recommendation_graph() -> StateGraph:
    """
    Build the LangGraph StateGraph for the recommendation pipeline.

    Returns the uncompiled StateGraph (call .compile() to get the
    executable CompiledStateGraph).
    """
    graph = StateGraph(RecommendationState)

    graph.add_node("retrieve_candidates", retrieve_candidates)
    graph.add_node("personalize", personalize)

    graph.add_edge(START, "retrieve_candidates")
    graph.add_conditional_edges(
        "retrieve_candidates",
        _check_after_retrieval,
        {"continue": "personalize", "error": END},
    )
    graph.add_edge("personalize", END)

    return graph


# Pre-built compiled graph, import and use directly
recommendation_graph = build_recommendation_graph().compile()


async def run_recommendation_pipeline(
    state: RecommendationState,
) -> dict[str, Any]:
    """
    Run the recommendation pipeline asynchronously.

    Returns:
        The final pipeline state as a dict, including:
        - "recommendations": ranked ScoredGift list
        - "error": error message string if the pipeline short-circuited
    """
    logger.info(
        "Starting recommendation pipeline (budget=%s, personalized=%s)",
        state.budget,
        state.include_personalization and state.context is not None,
    )

    result = await recommendation_graph.ainvoke(state)

    error = result.get("error")
    if error:
        logger.warning("Pipeline completed with error: %s", error)
    else:
        logger.info(
            "Pipeline completed: %d recommendations",
            len(result.get("recommendations", [])),
        )

    return result
