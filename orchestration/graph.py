# orchestration/graph.py

from langgraph.graph import StateGraph, END

from orchestration.state import GraphState

def build_graph(retriever_runnable, synthesizer_runnable):
    graph = StateGraph(GraphState)

    graph.add_node("retrieve", retriever_runnable)
    graph.add_node("synthesize", synthesizer_runnable)

    # synthesis consumes retrieval output, so the edge order is fixed
    graph.set_entry_point("retrieve")
    graph.add_edge("retrieve", "synthesize")
    graph.add_edge("synthesize", END)

    return graph.compile()
