from langgraph.graph import END, START, StateGraph

from stepchat.api.graphs.new_turn.execute_pipeline import execute_pipeline
from stepchat.api.graphs.new_turn.generate_reply import generate_reply
from stepchat.api.graphs.new_turn.models import NewTurnGraphContext, NewTurnGraphState
from stepchat.api.graphs.new_turn.save_turn import save_turn

_new_turn_graph = StateGraph(state_schema=NewTurnGraphState, context_schema=NewTurnGraphContext)

_new_turn_graph.add_node("generate_reply", generate_reply)
_new_turn_graph.add_node("execute_pipeline", execute_pipeline)
_new_turn_graph.add_node("save_turn", save_turn)


def route_by_pipeline(state: NewTurnGraphState) -> str:
    if state.pipeline is None:
        return "generate_reply"
    return "execute_pipeline"


def route_by_status(state: NewTurnGraphState) -> str:
    if state.status == "failed":
        return END
    return "save_turn"


_new_turn_graph.add_conditional_edges(START, route_by_pipeline, ["generate_reply", "execute_pipeline"])
_new_turn_graph.add_conditional_edges("generate_reply", route_by_status, ["save_turn", END])
_new_turn_graph.add_conditional_edges("execute_pipeline", route_by_status, ["save_turn", END])
_new_turn_graph.add_edge("save_turn", END)

new_turn_graph = _new_turn_graph.compile()

__all__ = ["NewTurnGraphContext", "NewTurnGraphState", "new_turn_graph"]
