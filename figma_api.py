"""Figma REST API client.

Fetches files and nodes and runs them through the simplifier, and resolves
and downloads rendered node images and image fills.

Usage:
    service = FigmaService(api_key)
    design = service.get_node("6kGd851qaAX4TiL44vpIrO", "16650:538", depth=3)
    paths = service.get_images(file_key, [{"nodeId": "1:2", "fileName": "logo.svg", "fileType": "svg"}], "/tmp/img")
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional

import requests

from logging_config import LOG_DIR
from server_config import FIGMA_DOWNLOAD_WORKERS, FIGMA_HTTP_TIMEOUT, write_logs_enabled
from transform import parse_figma_response

logger = logging.getLogger("figma_mcp.api")

FIGMA_API_BASE = "https://api.figma.com/v1"

CHUNK_SIZE = 64 * 1024


class FigmaError(Exception):
    """Non-success response from the Figma API; status and message kept as sent."""

    def __init__(self, status: int, err: str):
        self.status = status
        self.err = err
        super().__init__(f"{status} {err}")


class FigmaRequestError(Exception):
    """The Figma API could not be reached."""


def normalize_node_id(node_id: str) -> str:
    # URLs carry node ids as "1-2", the API expects "1:2"
    return node_id.replace("-", ":")


def download_figma_image(file_name: str, local_path: str, image_url: str,
                         timeout: float = FIGMA_HTTP_TIMEOUT) -> str:
    """Stream an image to <local_path>/<file_name> and return the full path."""
    directory = Path(local_path)
    directory.mkdir(parents=True, exist_ok=True)
    full_path = directory / file_name

    try:
        with requests.get(image_url, stream=True, timeout=timeout) as res:
            if not res.ok:
                raise FigmaError(res.status_code, res.reason or "Unknown error")
            with open(full_path, "wb") as f:
                for chunk in res.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
    except (requests.RequestException, OSError, FigmaError):
        full_path.unlink(missing_ok=True)
        raise

    logger.info(f"Saved image {full_path}")
    return str(full_path)


def write_logs(name: str, value) -> None:
    """Dump a value as JSON into LOG_DIR when FIGMA_WRITE_LOGS is enabled."""
    if not write_logs_enabled():
        return
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        with open(LOG_DIR / name, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.warning(f"Failed to write {name}: {e}")


class FigmaService:
    """Synchronous Figma API client.

    Args:
        api_key: Figma Personal Access Token, sent as X-Figma-Token.
        timeout: HTTP request timeout in seconds.
        max_workers: Parallel image downloads.
    """

    def __init__(self, api_key: str, timeout: float = FIGMA_HTTP_TIMEOUT,
                 max_workers: int = FIGMA_DOWNLOAD_WORKERS):
        self.api_key = api_key
        self.base_url = FIGMA_API_BASE
        self.timeout = timeout
        self.max_workers = max(1, max_workers)

    def _request(self, path: str, params: Optional[Dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        logger.info(f"Calling {url}")
        try:
            res = requests.get(
                url,
                headers={"X-Figma-Token": self.api_key},
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise FigmaRequestError(f"Failed to request Figma API: {e}") from e

        if not res.ok:
            raise FigmaError(res.status_code, res.reason or "Unknown error")
        return res.json()

    def _download_all(self, jobs: List[tuple], local_path: str) -> List[str]:
        if not jobs:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [
                pool.submit(download_figma_image, file_name, local_path, url, self.timeout)
                for file_name, url in jobs
            ]
            return [future.result() for future in futures]

    # ------------------------------------------------------------------
    # Design data
    # ------------------------------------------------------------------

    def get_file(self, file_key: str, depth: Optional[int] = None) -> dict:
        params = {"depth": depth} if depth else None
        logger.info(f"Fetching Figma file {file_key} (depth: {depth or 'default'})")
        raw = self._request(f"/files/{file_key}", params=params)
        write_logs("figma-raw.json", raw)

        simplified = parse_figma_response(raw, max_depth=depth or None)
        write_logs("figma-simplified.json", simplified)
        return simplified

    def get_node(self, file_key: str, node_id: str, depth: Optional[int] = None) -> dict:
        node_id = normalize_node_id(node_id)
        params = {"ids": node_id}
        if depth:
            params["depth"] = depth

        raw = self._request(f"/files/{file_key}/nodes", params=params)
        write_logs("figma-raw.json", raw)

        nodes = raw.get("nodes") or {}
        if not nodes.get(node_id):
            raise ValueError(f"Node ID '{node_id}' not found in response. Available nodes: {list(nodes.keys())}")

        # The API counts depth below the requested node; the walker counts the node itself
        simplified = parse_figma_response(raw, max_depth=depth + 1 if depth else None)
        write_logs("figma-simplified.json", simplified)
        return simplified

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def get_image_urls(self, file_key: str, node_ids: List[str], fmt: str = "png", scale: int = 2) -> Dict[str, str]:
        """Render nodes via GET /images/:key and return node id -> image URL."""
        if not node_ids:
            return {}
        data = self._request(
            f"/images/{file_key}",
            params={"ids": ",".join(node_ids), "format": fmt, "scale": scale},
        )
        return data.get("images") or {}

    def get_image_fills(self, file_key: str, nodes: List[dict], local_path: str) -> List[str]:
        """Download image fills; a fill whose imageRef is unknown yields ""."""
        if not nodes:
            return []

        data = self._request(f"/files/{file_key}/images")
        images = (data.get("meta") or {}).get("images") or {}

        jobs = []
        results = [""] * len(nodes)
        positions = []
        for i, node in enumerate(nodes):
            image_url = images.get(node["imageRef"])
            if not image_url:
                logger.warning(f"No image URL for imageRef {node['imageRef']}")
                continue
            jobs.append((node["fileName"], image_url))
            positions.append(i)

        for i, path in zip(positions, self._download_all(jobs, local_path)):
            results[i] = path
        return results

    def get_images(self, file_key: str, nodes: List[dict], local_path: str) -> List[str]:
        """Render png and svg nodes in two batched calls, then download what resolved."""
        png_ids = [normalize_node_id(n["nodeId"]) for n in nodes if n["fileType"] == "png"]
        svg_ids = [normalize_node_id(n["nodeId"]) for n in nodes if n["fileType"] == "svg"]

        files = {}
        files.update(self.get_image_urls(file_key, png_ids, fmt="png"))
        files.update(self.get_image_urls(file_key, svg_ids, fmt="svg"))

        jobs = []
        for node in nodes:
            image_url = files.get(normalize_node_id(node["nodeId"]))
            if image_url:
                jobs.append((node["fileName"], image_url))
            else:
                logger.warning(f"Figma returned no image for node {node['nodeId']}")

        return self._download_all(jobs, local_path)
