"""
Asset download step for generated images and videos.
"""

from pathlib import Path
from typing import List, Optional, Tuple

import requests
from PIL import Image

from .base import PipelineStep
from ..config import PipelineConfig
from ..errors import FilesystemError, TransportError


class AssetFetcherStep(PipelineStep[List[Tuple[str, Path]], List[Path]]):
    """
    Downloads remote assets to local files, one at a time and in order.

    Input: List of (url, destination path) pairs
    Output: List of written paths, in input order
    """

    name = "asset_download"
    description = "Download generated assets"

    def __init__(self, config: PipelineConfig, session: Optional[requests.Session] = None):
        super().__init__(config)
        self.session = session or requests.Session()

    def run(self, downloads: List[Tuple[str, Path]]) -> List[Path]:
        saved = []
        for idx, (url, path) in enumerate(downloads):
            print(f"Downloading asset {idx+1}/{len(downloads)}...")
            saved.append(self.download(url, path))
        return saved

    def download(self, url: str, path: Path) -> Path:
        data = self.fetch(url)
        self.write_to_path(data, path)
        print(f"File saved to: {path}")
        return path

    def fetch(self, url: str) -> bytes:
        """Fetch the full body of ``url``."""
        try:
            response = self.session.get(url, timeout=self.config.download_timeout_sec, stream=True)
        except requests.RequestException as e:
            raise TransportError(f"Failed to download file: {e}") from e

        try:
            if not 200 <= response.status_code < 300:
                raise TransportError(
                    f"Failed to download file ({response.status_code}): {url}",
                    status_code=response.status_code,
                )
            chunks = []
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    chunks.append(chunk)
            return b"".join(chunks)
        except requests.RequestException as e:
            raise TransportError(f"Failed to download file: {e}") from e
        finally:
            response.close()

    def write_to_path(self, data: bytes, path: Path) -> None:
        """Create or overwrite ``path`` with ``data``."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise FilesystemError(f"Failed to write {path}: {e}") from e

    @staticmethod
    def describe_image(path: Path) -> Optional[Tuple[int, int]]:
        """Return (width, height) of a downloaded image, or None if it is not one."""
        try:
            with Image.open(path) as img:
                return img.size
        except OSError as e:
            print(f"WARNING: {path.name} is not a readable image: {e}")
            return None
