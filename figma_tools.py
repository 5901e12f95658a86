import logging
from typing import List, Optional

import requests
from fastmcp.utilities.types import Image
from pydantic import BaseModel, Field

from figma_api import FigmaService, normalize_node_id
from mcp_server import mcp

logger = logging.getLogger("figma_mcp.tools")

_service: Optional[FigmaService] = None


def set_figma_service(service: FigmaService) -> None:
    global _service
    _service = service


def get_figma_service() -> FigmaService:
    if _service is None:
        raise RuntimeError("Figma service is not configured; start the server through cli.main()")
    return _service


class ImageNode(BaseModel):
    nodeId: str = Field(description="The ID of the Figma image node to fetch, formatted as 1234:5678")
    imageRef: Optional[str] = Field(
        default=None,
        description="Required if the node has an image fill. Leave blank when downloading a vector SVG.",
    )
    fileName: str = Field(description="The local name for saving the fetched file")


def fetch_design_data(service: FigmaService, fileKey: str, nodeId: str = None, depth: int = None) -> dict:
    logger.info(
        f"Fetching {f'{depth} layers of' if depth else 'all layers of'} "
        f"{f'node {nodeId} from file' if nodeId else 'full file'} {fileKey}"
    )
    if nodeId:
        design = service.get_node(fileKey, nodeId, depth)
    else:
        design = service.get_file(fileKey, depth)

    logger.info(f"Successfully fetched file: {design.get('name')}")
    metadata = {k: v for k, v in design.items() if k not in ("nodes", "globalVars")}
    return {
        "metadata": metadata,
        "nodes": design.get("nodes", []),
        "globalVars": design.get("globalVars", {}),
    }


def download_images(service: FigmaService, fileKey: str, nodes: List[dict], localPath: str) -> str:
    image_fills = [n for n in nodes if n.get("imageRef")]
    render_requests = [
        {
            "nodeId": n["nodeId"],
            "fileName": n["fileName"],
            "fileType": "svg" if n["fileName"].endswith(".svg") else "png",
        }
        for n in nodes if not n.get("imageRef")
    ]

    downloads = service.get_image_fills(fileKey, image_fills, localPath)
    downloads += service.get_images(fileKey, render_requests, localPath)

    if all(downloads):
        return f"Success, {len(downloads)} images downloaded: {', '.join(downloads)}"
    return "Failed"


@mcp.tool(
    name="get_figma_data",
    description="""
    Fetches a Figma file, or a single node of it, as a simplified layout/style tree.

    Use this tool when you want structured layout and styling data of a UI for code generation.
    Shared styles are listed once under globalVars and referenced by id from the nodes.
    Only pass depth when the user explicitly asks for a limited traversal.
    """
)
def get_figma_data(fileKey: str, nodeId: str = None, depth: int = None):
    try:
        return fetch_design_data(get_figma_service(), fileKey, nodeId, depth)
    except Exception as e:
        logger.exception(f"Error fetching file {fileKey}")
        return {"error": f"Error fetching file: {e}"}


@mcp.tool(
    name="download_figma_images",
    description="""
    Downloads SVG and PNG images used in a Figma file, based on the IDs of image or icon nodes.

    localPath must be an absolute directory path in the format of the current operating system,
    e.g. /Users/me/project/public/images. It is created if it does not exist.
    """
)
def download_figma_images(fileKey: str, nodes: List[ImageNode], localPath: str) -> str:
    try:
        return download_images(get_figma_service(), fileKey, [n.model_dump() for n in nodes], localPath)
    except Exception as e:
        logger.exception(f"Error downloading images from file {fileKey}")
        return f"Error downloading images: {e}"


@mcp.tool(
    name="get_figma_node_preview",
    description="""
    Renders a design node from Figma and returns it as an image for visual reference.
    """
)
def get_figma_node_preview(fileKey: str, nodeId: str):
    try:
        nodeId = normalize_node_id(nodeId)
        service = get_figma_service()
        image_url = service.get_image_urls(fileKey, [nodeId]).get(nodeId)
        if not image_url:
            return {"error": f"Could not get image URL for nodeId {nodeId}"}

        image_response = requests.get(image_url, timeout=service.timeout)
        image_response.raise_for_status()

        img = Image(data=image_response.content, format="png")
        return img.to_image_content()

    except Exception as e:
        logger.exception(f"Error rendering node {nodeId}")
        return {"error": f"Failed to fetch or convert image: {e}"}
