"""
GitHub releases client.
Resolves the latest release tag of a repository and downloads release assets.
"""

import json
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import urllib.request
import urllib.error

from ..errors import DownloadError


API_BASE = "https://api.github.com"
DOWNLOAD_BASE = "https://github.com"


@dataclass
class ReleaseAsset:
    """A concrete release asset for one repository and tag."""
    repo: str
    tag: str
    name: str

    @property
    def url(self) -> str:
        return f"{DOWNLOAD_BASE}/{self.repo}/releases/download/{self.tag}/{self.name}"


class GitHubReleasesClient:
    """Minimal GitHub releases client built on urllib."""

    def __init__(self, github_token: Optional[str] = None, timeout: Optional[float] = 60.0):
        self.logger = logging.getLogger(__name__)
        self.github_token = github_token or os.environ.get('GITHUB_TOKEN')
        self.timeout = timeout

        if not self.github_token:
            self.logger.debug("No GitHub token found. Using unauthenticated requests (rate limit: 60/hour)")

    def _request(self, url: str, api: bool = False) -> urllib.request.Request:
        request = urllib.request.Request(url)
        request.add_header("User-Agent", "multishell-setup")
        if api:
            if self.github_token:
                request.add_header("Authorization", f"token {self.github_token}")
            request.add_header("Accept", "application/vnd.github.v3+json")
        return request

    def latest_tag(self, repo: str) -> str:
        """
        Resolve the tag of the latest (non pre-release) release.

        Args:
            repo: Repository as owner/name

        Returns:
            Tag name, e.g. "v0.23.3"
        """
        url = f"{API_BASE}/repos/{repo}/releases/latest"
        try:
            with urllib.request.urlopen(self._request(url, api=True), timeout=self.timeout) as response:
                data = json.loads(response.read().decode())
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise DownloadError(f"No releases found for {repo}")
            elif e.code == 403:
                raise DownloadError("GitHub API rate limit exceeded. Set GITHUB_TOKEN to increase limit.")
            else:
                raise DownloadError(f"GitHub API error for {repo}: {e.code}")
        except (urllib.error.URLError, OSError, json.JSONDecodeError) as e:
            raise DownloadError(f"Failed to query latest release of {repo}: {e}")

        tag = data.get("tag_name")
        if not tag:
            raise DownloadError(f"tag_name not found in GitHub API response for {repo}")
        self.logger.info(f"Latest release of {repo}: {tag}")
        return tag

    def download(self, url: str, dest: Path) -> Path:
        """Download `url` to `dest`, creating parent directories."""
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Downloading {url}")
        try:
            with urllib.request.urlopen(self._request(url), timeout=self.timeout) as response, \
                    open(dest, "wb") as fh:
                shutil.copyfileobj(response, fh)
        except urllib.error.HTTPError as e:
            raise DownloadError(f"Download failed ({e.code}): {url}")
        except (urllib.error.URLError, OSError) as e:
            raise DownloadError(f"Download failed: {url}: {e}")
        return dest
