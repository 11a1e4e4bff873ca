from typing import Iterable, List, Optional, Tuple

import requests
from pydantic import BaseModel, ConfigDict

from stenv_installer._src.constants import HTTP_TIMEOUT
from stenv_installer._src.logging import get_logger
from stenv_installer._src.models.environment import CondaEnvironmentSpec
from stenv_installer._src.models.release import GithubRelease, ReleaseFilename, parse_release_filename
from stenv_installer._src.utils import get_filename, natural_sort_key


logger = get_logger(__name__)


class ReleaseCatalog(BaseModel):
    """Release asset urls available for one platform, oldest first.

    The catalog is built once at startup and never modified, the last
    entry is the default choice.
    """
    model_config = ConfigDict(frozen=True)

    platform: str
    urls: Tuple[str, ...] = ()

    @classmethod
    def from_urls(cls, urls: Iterable[str], platform: str) -> "ReleaseCatalog":
        return cls(platform=platform, urls=tuple(filter_platform(sort_releases(urls), platform)))

    @classmethod
    def from_github(
        cls,
        url: str,
        platform: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> "ReleaseCatalog":
        catalog = cls.from_urls(fetch_release_urls(url, token=token, session=session), platform)
        logger.info("built release catalog", platform=platform, releases=len(catalog))
        return catalog

    def __len__(self):
        return len(self.urls)

    def __getitem__(self, index: int) -> str:
        return self.urls[index]

    @property
    def latest(self) -> Optional[str]:
        if not self.urls:
            return None
        return self.urls[-1]

    def parsed(self) -> List[ReleaseFilename]:
        return [parse_release_filename(url) for url in self.urls]


def sort_releases(urls: Iterable[str]) -> List[str]:
    """Sort release urls in ascending version order"""
    return sorted(urls, key=natural_sort_key)


def filter_platform(urls: Iterable[str], platform: str) -> List[str]:
    """Keep the urls whose filename carries `-<platform>-`"""
    token = f"-{platform}-"
    return [url for url in urls if token in get_filename(url)]


def fetch_release_urls(
    url: str,
    token: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> List[str]:
    """Collect the download url of every asset of every release.

    Follows GitHub's `Link: rel="next"` pagination.
    """
    if session is None:
        with requests.Session() as http:
            return fetch_release_urls(url, token=token, session=http)

    http = session
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    asset_urls = []
    params = {"per_page": 100}
    next_url = url
    while next_url:
        logger.debug("fetching releases", url=next_url)
        response = http.get(next_url, headers=headers, params=params, timeout=HTTP_TIMEOUT)
        response.raise_for_status()
        for raw_release in response.json():
            release = GithubRelease.model_validate(raw_release)
            asset_urls.extend(asset.browser_download_url for asset in release.assets)
        next_url = response.links.get("next", {}).get("url")
        # the next link already carries the query string
        params = None

    return asset_urls


def fetch_environment_spec(url: str, session: Optional[requests.Session] = None) -> CondaEnvironmentSpec:
    """Download and parse the environment file of a release"""
    http = session or requests
    response = http.get(url, timeout=HTTP_TIMEOUT)
    response.raise_for_status()
    return CondaEnvironmentSpec.from_yaml(response.text)
