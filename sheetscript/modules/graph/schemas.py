from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from sheetscript.modules.script.constants import PLAYER_ACTOR_ID, ROOT_NODE_ID


class Edge(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    origin_document: int
    origin_node: int
    destination_document: int
    destination_node: int


class DialogueNode(BaseModel):
    model_config = ConfigDict(extra="forbid")

    document_id: int
    local_id: int = Field(ge=0)
    title: str = ""
    speaker_actor_id: int
    listener_actor_id: int
    body_text: str = ""
    menu_text: str = ""
    sequence_script: str = ""
    extra_fields: dict[str, str] = Field(default_factory=dict)
    outgoing_edges: list[Edge] = Field(default_factory=list)
    is_root: bool = False
    row_number: int | None = None

    def link_to(self, destination: DialogueNode) -> bool:
        """Add an edge to ``destination`` unless one already exists."""
        for edge in self.outgoing_edges:
            if (
                edge.destination_document == destination.document_id
                and edge.destination_node == destination.local_id
            ):
                return False
        self.outgoing_edges.append(
            Edge(
                origin_document=self.document_id,
                origin_node=self.local_id,
                destination_document=destination.document_id,
                destination_node=destination.local_id,
            )
        )
        return True


class DialogueGraph(BaseModel):
    model_config = ConfigDict(extra="forbid")

    document_id: int = Field(ge=1)
    title: str = Field(min_length=1)
    actor_id: int = PLAYER_ACTOR_ID
    conversant_id: int
    nodes: list[DialogueNode] = Field(default_factory=list)

    @property
    def root(self) -> DialogueNode:
        node = self.node(ROOT_NODE_ID)
        if node is None:
            raise LookupError(f"document '{self.title}' has no root node")
        return node

    def node(self, local_id: int) -> DialogueNode | None:
        for node in self.nodes:
            if node.local_id == local_id:
                return node
        return None

    def find_node(self, key: str) -> DialogueNode | None:
        token = str(key or "").strip()
        if not token:
            return None
        lowered = token.lower()
        for node in self.nodes:
            if node.title.lower() == lowered or str(node.local_id) == token:
                return node
        return None

    def edges(self) -> list[Edge]:
        return [edge for node in self.nodes for edge in node.outgoing_edges]

    def edge_set(self) -> set[tuple[int, int, int, int]]:
        return {
            (edge.origin_document, edge.origin_node, edge.destination_document, edge.destination_node)
            for edge in self.edges()
        }


class PendingCrossLink(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    document_id: int
    document_title: str
    origin_node: int
    target: str
    row_number: int
