"""
Integration modules for external services.
"""

from .github_releases import GitHubReleasesClient, ReleaseAsset

__all__ = ["GitHubReleasesClient", "ReleaseAsset"]
