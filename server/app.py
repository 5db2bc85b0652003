"""FastAPI server for the graph traversal visualizer

Includes:
- REST API for graph editing, import/export, and custom graph generation
- Playback endpoints driving the session state machine
- AG-UI streaming endpoint replaying a generated step sequence over SSE
"""

import asyncio
import time
from contextlib import asynccontextmanager

from ag_ui.core import (
    BaseEvent,
    CustomEvent,
    RunErrorEvent,
    RunFinishedEvent,
    RunStartedEvent,
    StateSnapshotEvent,
    StepFinishedEvent,
    StepStartedEvent,
)
from ag_ui.encoder import EventEncoder
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from graph import (
    Graph,
    GraphEdge,
    GraphError,
    InvalidEdgeReference,
    InvalidStartState,
    ParseError,
    build_adjacency_index,
    dump_graph_document,
)
from playback import UNSET, GraphSession, PlaybackConfig
from traversal import TraversalLog, TraversalStep, generate_run_key, generate_steps

from .payloads import (
    CustomGraphRequest,
    EdgeRequest,
    GraphResponse,
    GraphStats,
    NodeRequest,
    PlaybackResponse,
    SeekRequest,
    SettingsRequest,
    TraversalRequest,
    TraversalResponse,
)

encoder = EventEncoder()


def encode_event(event: BaseEvent) -> str:
    """Encode an AG-UI event as SSE with a millisecond timestamp.

    The original event is left untouched.
    """
    stamped = event.model_copy(update={"timestamp": int(time.time() * 1000)})
    return encoder.encode(stamped)


# --- FastAPI App ---


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.session = GraphSession(config=PlaybackConfig.from_env())
    print("[SERVER] Session created")
    yield
    app.state.session.timer.disarm()
    print("[SERVER] Session closed")


app = FastAPI(
    title="Graph Traversal Visualizer",
    description="Step-by-step BFS/DFS traversal with replayable playback",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidStartState)
async def invalid_start_state_handler(request: Request, exc: InvalidStartState) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(InvalidEdgeReference)
async def invalid_edge_handler(request: Request, exc: InvalidEdgeReference) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ParseError)
async def parse_error_handler(request: Request, exc: ParseError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def get_session(request: Request) -> GraphSession:
    return request.app.state.session


def graph_response(session: GraphSession) -> GraphResponse:
    graph = session.graph
    return GraphResponse(
        nodes=graph.nodes,
        edges=graph.edges,
        graph_type=graph.graph_type,
        start_node=session.start_node,
        stats=GraphStats(node_count=len(graph.nodes), edge_count=len(graph.edges)),
    )


def playback_response(session: GraphSession) -> PlaybackResponse:
    return PlaybackResponse(
        status=session.status,
        cursor=session.cursor,
        total_steps=len(session.steps),
        speed=session.speed,
        algorithm=session.algorithm,
        start_node=session.start_node,
        run_key=session.run_key,
        current_step=session.current_step,
        current_edge=session.current_edge,
    )


# --- Graph Endpoints ---


@app.get("/api/graph", response_model=GraphResponse)
async def get_graph(session: GraphSession = Depends(get_session)) -> GraphResponse:
    return graph_response(session)


@app.put("/api/graph", response_model=GraphResponse)
async def import_graph(request: Request, session: GraphSession = Depends(get_session)) -> GraphResponse:
    """Import a persisted document (raw JSON body). Atomic: 400 leaves the graph as it was."""
    session.import_graph(await request.body())
    return graph_response(session)


@app.get("/api/graph/export")
async def export_graph(session: GraphSession = Depends(get_session)) -> dict:
    """Export the graph in the persisted document layout."""
    return session.export_graph()


@app.delete("/api/graph", response_model=GraphResponse)
async def clear_graph(session: GraphSession = Depends(get_session)) -> GraphResponse:
    session.clear_graph()
    return graph_response(session)


@app.post("/api/graph/nodes", response_model=GraphResponse)
async def add_node(request: NodeRequest, session: GraphSession = Depends(get_session)) -> GraphResponse:
    try:
        session.add_node(position=request.position, node_id=request.id, label=request.label)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return graph_response(session)


@app.delete("/api/graph/nodes/{node_id}", response_model=GraphResponse)
async def remove_node(node_id: str, session: GraphSession = Depends(get_session)) -> GraphResponse:
    try:
        session.remove_node(node_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Node '{node_id}' not found")
    return graph_response(session)


@app.post("/api/graph/edges", response_model=GraphResponse)
async def add_edge(request: EdgeRequest, session: GraphSession = Depends(get_session)) -> GraphResponse:
    session.add_edge(request.source, request.target)
    return graph_response(session)


@app.delete("/api/graph/edges/{edge_id}", response_model=GraphResponse)
async def remove_edge(edge_id: str, session: GraphSession = Depends(get_session)) -> GraphResponse:
    try:
        session.remove_edge(edge_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Edge '{edge_id}' not found")
    return graph_response(session)


@app.post("/api/graph/custom", response_model=GraphResponse)
async def generate_custom_graph(
    request: CustomGraphRequest, session: GraphSession = Depends(get_session)
) -> GraphResponse:
    """Replace the graph with nodes 1..n on a circle and the given edge list."""
    session.generate_custom_graph(
        request.num_nodes, request.edge_list, request.num_edges, graph_type=request.graph_type
    )
    return graph_response(session)


@app.put("/api/settings", response_model=PlaybackResponse)
async def update_settings(
    request: SettingsRequest, session: GraphSession = Depends(get_session)
) -> PlaybackResponse:
    """Apply the given selections together; a 409 leaves every setting as it was."""
    settings = request.model_dump(exclude_unset=True)
    session.apply_settings(
        algorithm=settings.get("algorithm"),
        start_node=settings.get("start_node", UNSET),
        graph_type=settings.get("graph_type"),
        speed=settings.get("speed"),
    )
    return playback_response(session)


# --- Playback Endpoints ---


@app.get("/api/playback", response_model=PlaybackResponse)
async def get_playback(session: GraphSession = Depends(get_session)) -> PlaybackResponse:
    return playback_response(session)


@app.post("/api/playback/run", response_model=PlaybackResponse)
async def run_playback(session: GraphSession = Depends(get_session)) -> PlaybackResponse:
    """Generate steps for the session graph and start autoplay (409 without a start node)."""
    session.run()
    return playback_response(session)


@app.post("/api/playback/pause", response_model=PlaybackResponse)
async def pause_playback(session: GraphSession = Depends(get_session)) -> PlaybackResponse:
    session.pause()
    return playback_response(session)


@app.post("/api/playback/resume", response_model=PlaybackResponse)
async def resume_playback(session: GraphSession = Depends(get_session)) -> PlaybackResponse:
    session.resume()
    return playback_response(session)


@app.post("/api/playback/step-forward", response_model=PlaybackResponse)
async def step_forward(session: GraphSession = Depends(get_session)) -> PlaybackResponse:
    session.step_forward()
    return playback_response(session)


@app.post("/api/playback/step-backward", response_model=PlaybackResponse)
async def step_backward(session: GraphSession = Depends(get_session)) -> PlaybackResponse:
    session.step_backward()
    return playback_response(session)


@app.post("/api/playback/seek", response_model=PlaybackResponse)
async def seek(request: SeekRequest, session: GraphSession = Depends(get_session)) -> PlaybackResponse:
    session.seek(request.index)
    return playback_response(session)


@app.post("/api/playback/reset", response_model=PlaybackResponse)
async def reset_playback(session: GraphSession = Depends(get_session)) -> PlaybackResponse:
    session.reset()
    return playback_response(session)


@app.get("/api/steps", response_model=list[TraversalStep])
async def get_steps(session: GraphSession = Depends(get_session)) -> list[TraversalStep]:
    return list(session.steps)


@app.get("/api/steps/{index}", response_model=TraversalStep)
async def get_step(index: int, session: GraphSession = Depends(get_session)) -> TraversalStep:
    """Step at ``index``, clamped to the valid range (404 only when there is no run)."""
    step = session.step_at(index)
    if step is None:
        raise HTTPException(status_code=404, detail="No steps generated")
    return step


@app.get("/api/log", response_model=TraversalLog)
async def get_log(session: GraphSession = Depends(get_session)) -> TraversalLog:
    return session.log


# --- Stateless Traversal Endpoints ---


def run_traversal_request(
    request: TraversalRequest,
) -> tuple[Graph, list[TraversalStep], TraversalLog, str]:
    """Generate steps for a request without touching the session.

    Raises:
        InvalidStartState: Missing start node or empty node list
        InvalidEdgeReference: An edge names an unknown node
    """
    graph = Graph(
        nodes=request.nodes,
        edges=[GraphEdge(id=e.id, source=e.source, target=e.target) for e in request.edges],
        graph_type=request.graph_type,
    )
    if not graph.nodes:
        raise InvalidStartState("Graph has no nodes")
    if request.start_node is None:
        raise InvalidStartState("No start node selected")

    adjacency = build_adjacency_index(graph.node_ids, graph.edges, graph.graph_type)
    steps, log = generate_steps(request.algorithm, request.start_node, adjacency, graph.node_ids)
    return graph, steps, log, generate_run_key(graph, request.algorithm, request.start_node)


@app.post("/api/traverse", response_model=TraversalResponse)
async def run_traversal(request: TraversalRequest) -> TraversalResponse:
    """Generate the full step sequence and log (non-streaming).

    For streaming updates, use /api/traverse/stream instead.
    """
    _, steps, log, run_key = run_traversal_request(request)
    return TraversalResponse(run_key=run_key, steps=steps, log=log)


@app.post("/api/traverse/stream")
async def stream_traversal(request: TraversalRequest):
    """Replay a generated step sequence with AG-UI streaming.

    Returns SSE stream with events:
    - RUN_STARTED: Generation finished, replay begins (runId = run key)
    - STATE_SNAPSHOT: The graph document being traversed
    - STEP_STARTED / STATE_SNAPSHOT / STEP_FINISHED: One triple per step
    - CUSTOM (traversal_log): The aggregate log
    - RUN_FINISHED: Replay complete with step/component counts
    - RUN_ERROR: Instead of all of the above when the request is rejected
    """

    async def event_generator():
        try:
            graph, steps, log, run_key = run_traversal_request(request)
        except GraphError as e:
            print(f"[SERVER] Traversal rejected: {e}")
            yield encode_event(RunErrorEvent(message=str(e), code=type(e).__name__))
            return

        thread_id = f"{request.algorithm.value.lower()}-{request.start_node}"
        yield encode_event(RunStartedEvent(thread_id=thread_id, run_id=run_key))
        yield encode_event(
            StateSnapshotEvent(
                snapshot={**dump_graph_document(graph), "graph_type": graph.graph_type}
            )
        )

        for step in steps:
            step_name = f"step-{step.step_index}"
            yield encode_event(StepStartedEvent(step_name=step_name))
            yield encode_event(StateSnapshotEvent(snapshot=step.model_dump()))
            yield encode_event(StepFinishedEvent(step_name=step_name))
            # Let the response flush between steps on large graphs
            await asyncio.sleep(0)

        yield encode_event(CustomEvent(name="traversal_log", value=log.model_dump()))
        yield encode_event(
            RunFinishedEvent(
                thread_id=thread_id,
                run_id=run_key,
                result={"total_steps": len(steps), "components": len(log.components)},
            )
        )
        print(f"[SERVER] Stream complete: run_key={run_key}, steps={len(steps)}")

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
