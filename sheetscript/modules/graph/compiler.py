from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from sheetscript.modules.graph.schemas import DialogueGraph, DialogueNode, PendingCrossLink
from sheetscript.modules.graph.sequence import build_sequence_script
from sheetscript.modules.pipeline.diagnostics import (
    DANGLING_LINK,
    DOCUMENT_COMPILED,
    DUPLICATE_NODE_KEY,
    RESERVED_START_REMOVED,
    UNPARSABLE_SPEAKER,
    DiagnosticLog,
)
from sheetscript.modules.script.constants import (
    CHOICE_ACTOR_ID,
    CROSS_LINK_SEPARATOR,
    DEFAULT_COUNTERPART_ACTOR_ID,
    NARRATOR_ACTOR_ID,
    PLAYER_ACTOR_ID,
    ROOT_NODE_ID,
    ROOT_NODE_TITLE,
    SYNTHETIC_KEY_PREFIX,
)
from sheetscript.modules.script.schemas import ScriptRow
from sheetscript.utils.tokens import is_blank, parse_int

_RESERVED_ACTOR_IDS = {PLAYER_ACTOR_ID, NARRATOR_ACTOR_ID, CHOICE_ACTOR_ID}


@dataclass(slots=True)
class SpeakerState:
    last_actor_id: int
    last_counterpart_id: int
    counterpart_default: int


@dataclass(slots=True)
class ResolvedSpeaker:
    speaker_id: int
    listener_id: int
    is_choice: bool


@dataclass(slots=True)
class DocumentCompileResult:
    graph: DialogueGraph
    pending_links: list[PendingCrossLink] = field(default_factory=list)
    compiled_rows: int = 0


def detect_primary_counterpart(rows: Sequence[ScriptRow]) -> int:
    for row in rows:
        actor_id = parse_int(row.speaker_token)
        if actor_id is not None and actor_id not in _RESERVED_ACTOR_IDS:
            return actor_id
    return DEFAULT_COUNTERPART_ACTOR_ID


def _listener_for(speaker_id: int, state: SpeakerState) -> int:
    if speaker_id in (PLAYER_ACTOR_ID, NARRATOR_ACTOR_ID):
        return state.last_counterpart_id or state.counterpart_default
    return PLAYER_ACTOR_ID


def resolve_speaker(
    row: ScriptRow,
    state: SpeakerState,
    *,
    document: str,
    diagnostics: DiagnosticLog,
) -> ResolvedSpeaker:
    if is_blank(row.speaker_token):
        actor_id = state.last_actor_id
    else:
        parsed = parse_int(row.speaker_token)
        if parsed is None:
            diagnostics.warn(
                UNPARSABLE_SPEAKER,
                f"Actor '{row.speaker_token}' is not a numeric id; reusing actor {state.last_actor_id}.",
                document=document,
                row_number=row.row_number,
            )
            actor_id = state.last_actor_id
        else:
            actor_id = parsed

    is_choice = actor_id == CHOICE_ACTOR_ID
    if is_choice:
        actor_id = PLAYER_ACTOR_ID
    else:
        state.last_actor_id = actor_id

    listener_id = _listener_for(actor_id, state)
    if not is_choice and actor_id not in (PLAYER_ACTOR_ID, NARRATOR_ACTOR_ID):
        state.last_counterpart_id = actor_id
    return ResolvedSpeaker(speaker_id=actor_id, listener_id=listener_id, is_choice=is_choice)


def _extra_fields(row: ScriptRow) -> dict[str, str]:
    out: dict[str, str] = {}
    if row.background_id:
        out["Background"] = row.background_id
    if row.expression_id:
        out["Expression"] = row.expression_id
    if row.auto_progress_locked:
        out["AutoProgressLocked"] = row.auto_progress_locked
    return out


def _link_rows(
    compiled: list[tuple[ScriptRow, DialogueNode]],
    node_index: dict[str, DialogueNode],
    *,
    document_id: int,
    document: str,
    diagnostics: DiagnosticLog,
) -> list[PendingCrossLink]:
    pending: list[PendingCrossLink] = []
    for idx, (row, node) in enumerate(compiled):
        following = compiled[idx + 1] if idx + 1 < len(compiled) else None

        if row.link_targets:
            for target in row.link_targets:
                if CROSS_LINK_SEPARATOR in target:
                    pending.append(
                        PendingCrossLink(
                            document_id=document_id,
                            document_title=document,
                            origin_node=node.local_id,
                            target=target,
                            row_number=row.row_number,
                        )
                    )
                    continue
                destination = node_index.get(target.lower())
                if destination is None:
                    diagnostics.warn(
                        DANGLING_LINK,
                        f"Link target '{target}' was not found in this document.",
                        document=document,
                        row_number=row.row_number,
                    )
                    continue
                node.link_to(destination)
        elif following is not None:
            if not following[0].is_choice:
                node.link_to(following[1])
            elif row.is_choice:
                # sibling options share the row after their menu
                for next_row, next_node in compiled[idx + 1 :]:
                    if not next_row.is_choice:
                        node.link_to(next_node)
                        break

        if not row.is_choice:
            for next_row, next_node in compiled[idx + 1 :]:
                if not next_row.is_choice:
                    break
                node.link_to(next_node)
    return pending


def _remove_reserved_start_nodes(
    graph: DialogueGraph,
    *,
    document: str,
    diagnostics: DiagnosticLog,
) -> set[int]:
    removed = {
        node.local_id
        for node in graph.nodes
        if node.local_id != ROOT_NODE_ID
        and (node.title == ROOT_NODE_TITLE or node.body_text == ROOT_NODE_TITLE)
    }
    if not removed:
        return removed
    graph.nodes = [node for node in graph.nodes if node.local_id not in removed]
    for node in graph.nodes:
        node.outgoing_edges = [
            edge
            for edge in node.outgoing_edges
            if not (edge.destination_document == graph.document_id and edge.destination_node in removed)
        ]
    diagnostics.warn(
        RESERVED_START_REMOVED,
        f"Removed {len(removed)} authored node(s) that collide with the reserved {ROOT_NODE_TITLE} entry.",
        document=document,
    )
    return removed


def compile_document(
    rows: Sequence[ScriptRow],
    *,
    document_id: int,
    title: str,
    diagnostics: DiagnosticLog | None = None,
) -> DocumentCompileResult:
    """Compile the rows of one story sheet into a dialogue graph.

    Links naming another document (``"<document>:<node>"``) are not resolved here;
    they come back as ``pending_links`` for the cross-document pass.
    """
    log = diagnostics if diagnostics is not None else DiagnosticLog()
    counterpart = detect_primary_counterpart(rows)
    graph = DialogueGraph(document_id=document_id, title=title, conversant_id=counterpart)

    root = DialogueNode(
        document_id=document_id,
        local_id=ROOT_NODE_ID,
        title=ROOT_NODE_TITLE,
        speaker_actor_id=PLAYER_ACTOR_ID,
        listener_actor_id=counterpart,
        is_root=True,
    )
    graph.nodes.append(root)

    state = SpeakerState(
        last_actor_id=NARRATOR_ACTOR_ID,
        last_counterpart_id=counterpart,
        counterpart_default=DEFAULT_COUNTERPART_ACTOR_ID,
    )
    node_index: dict[str, DialogueNode] = {}
    compiled: list[tuple[ScriptRow, DialogueNode]] = []
    next_local_id = ROOT_NODE_ID + 1

    for row in rows:
        if not row.is_meaningful:
            continue
        speaker = resolve_speaker(row, state, document=title, diagnostics=log)
        node = DialogueNode(
            document_id=document_id,
            local_id=next_local_id,
            title=row.node_key,
            speaker_actor_id=speaker.speaker_id,
            listener_actor_id=speaker.listener_id,
            body_text=row.text,
            menu_text=row.text if speaker.is_choice else "",
            sequence_script=build_sequence_script(row),
            extra_fields=_extra_fields(row),
            row_number=row.row_number,
        )
        next_local_id += 1

        key = row.node_key.lower()
        if key and key in node_index:
            log.warn(
                DUPLICATE_NODE_KEY,
                f"NodeID '{row.node_key}' is already used by an earlier row; this row is only linkable by row.",
                document=title,
                row_number=row.row_number,
            )
            key = ""
        if not key:
            key = f"{SYNTHETIC_KEY_PREFIX}{row.row_number}"
        node_index.setdefault(key, node)

        graph.nodes.append(node)
        compiled.append((row, node))

    pending = _link_rows(compiled, node_index, document_id=document_id, document=title, diagnostics=log)

    if compiled:
        root.link_to(compiled[0][1])

    removed = _remove_reserved_start_nodes(graph, document=title, diagnostics=log)
    if removed:
        pending = [link for link in pending if link.origin_node not in removed]
        survivors = [node for _, node in compiled if node.local_id not in removed]
        if not root.outgoing_edges and survivors:
            root.link_to(survivors[0])

    log.info(
        DOCUMENT_COMPILED,
        f"Compiled {len(compiled)} dialogue node(s), {len(pending)} cross-document link(s) pending.",
        document=title,
    )
    return DocumentCompileResult(graph=graph, pending_links=pending, compiled_rows=len(compiled))
