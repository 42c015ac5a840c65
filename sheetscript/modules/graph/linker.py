from __future__ import annotations

from collections.abc import Iterable

from sheetscript.modules.graph.schemas import DialogueGraph, DialogueNode, PendingCrossLink
from sheetscript.modules.pipeline.diagnostics import (
    CROSS_LINK_MALFORMED,
    CROSS_LINK_RESOLVED,
    CROSS_LINK_UNKNOWN_DOCUMENT,
    CROSS_LINK_UNKNOWN_NODE,
    DiagnosticLog,
)
from sheetscript.modules.script.constants import CROSS_LINK_SEPARATOR, START_TOKEN


def split_cross_target(target: str) -> tuple[str, str] | None:
    parts = str(target or "").split(CROSS_LINK_SEPARATOR)
    if len(parts) != 2:
        return None
    document_name, node_key = (part.strip() for part in parts)
    if not document_name or not node_key:
        return None
    return document_name, node_key


def resolve_target_node(graph: DialogueGraph, node_key: str) -> DialogueNode | None:
    if node_key.lower() == START_TOKEN:
        return graph.root
    return graph.find_node(node_key)


def resolve_cross_document_links(
    graphs: Iterable[DialogueGraph],
    pending: list[PendingCrossLink],
    *,
    diagnostics: DiagnosticLog | None = None,
) -> int:
    """Attach every pending ``"<document>:<node>"`` link and empty ``pending``.

    Returns the number of edges added. Unresolvable links are logged and skipped.
    """
    log = diagnostics if diagnostics is not None else DiagnosticLog()
    if not pending:
        return 0

    graph_list = list(graphs)
    by_title: dict[str, DialogueGraph] = {}
    by_id: dict[int, DialogueGraph] = {}
    for graph in graph_list:
        by_title.setdefault(graph.title.lower(), graph)
        by_id[graph.document_id] = graph

    log.info(CROSS_LINK_RESOLVED, f"Processing {len(pending)} cross-document link(s).")
    added = 0
    for link in pending:
        parsed = split_cross_target(link.target)
        if parsed is None:
            log.warn(
                CROSS_LINK_MALFORMED,
                f"Cross-document link '{link.target}' must look like '<document>:<node>'.",
                document=link.document_title,
                row_number=link.row_number,
            )
            continue
        document_name, node_key = parsed

        target_graph = by_title.get(document_name.lower())
        if target_graph is None:
            log.error(
                CROSS_LINK_UNKNOWN_DOCUMENT,
                f"Cross-document link target document '{document_name}' does not exist.",
                document=link.document_title,
                row_number=link.row_number,
            )
            continue

        destination = resolve_target_node(target_graph, node_key)
        if destination is None:
            log.error(
                CROSS_LINK_UNKNOWN_NODE,
                f"Node '{node_key}' was not found in document '{target_graph.title}'.",
                document=link.document_title,
                row_number=link.row_number,
            )
            continue

        origin_graph = by_id.get(link.document_id)
        origin = origin_graph.node(link.origin_node) if origin_graph is not None else None
        if origin is None:
            log.error(
                CROSS_LINK_UNKNOWN_NODE,
                f"Origin node {link.origin_node} of link '{link.target}' is no longer compiled.",
                document=link.document_title,
                row_number=link.row_number,
            )
            continue

        if origin.link_to(destination):
            added += 1
        log.info(
            CROSS_LINK_RESOLVED,
            f"Linked to {target_graph.title}:{node_key}.",
            document=link.document_title,
            row_number=link.row_number,
        )

    pending.clear()
    return added
