"""FastAPI routes for node creation, properties and subtree reads.

Failures raised by the service (NotFoundError, BusinessRuleError,
InvalidInputError) are mapped to responses by the app's exception handlers.
"""

from fastapi import APIRouter, Depends, status

from nodetree.nodes.schemas import CreateNodeRequest, CreatePropertyRequest, SubtreeResponse
from nodetree.nodes.service import NodeService

router = APIRouter(tags=["nodes"])


def get_node_service() -> NodeService:
    """Dependency placeholder, replaced at app startup."""
    raise RuntimeError("NodeService not initialized")


@router.post("/nodes", status_code=status.HTTP_201_CREATED)
async def create_node(
    request: CreateNodeRequest,
    service: NodeService = Depends(get_node_service),
) -> SubtreeResponse:
    return SubtreeResponse(data=await service.create_node(request))


@router.post("/nodes/{node_id}/properties", status_code=status.HTTP_201_CREATED)
async def create_property(
    node_id: str,
    request: CreatePropertyRequest,
    service: NodeService = Depends(get_node_service),
) -> SubtreeResponse:
    return SubtreeResponse(data=await service.add_property(node_id, request))


@router.get("/nodes/{node_id}")
async def get_node(
    node_id: str,
    service: NodeService = Depends(get_node_service),
) -> SubtreeResponse:
    return SubtreeResponse(data=await service.get_subtree_by_id(node_id))


@router.get("/subtree/{path:path}")
async def get_subtree(
    path: str,
    service: NodeService = Depends(get_node_service),
) -> SubtreeResponse:
    """Subtree of the node at /{path}, e.g. /subtree/AlphaPC/Processing."""
    segments = [segment for segment in path.split("/") if segment]
    return SubtreeResponse(data=await service.get_subtree_by_path("/" + "/".join(segments)))
