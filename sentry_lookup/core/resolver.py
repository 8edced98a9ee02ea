"""Project list retrieval and slug lookup."""
from __future__ import annotations

from typing import Iterable, List, Optional

from sentry_lookup.api.sentry_client import SentryClient
from sentry_lookup.core.config import LookupConfig
from sentry_lookup.core.exceptions import CacheReadError, ProjectNotFoundError
from sentry_lookup.core.logging import get_logger
from sentry_lookup.core.schemas import Project
from sentry_lookup.store.cache import ProjectCache

log = get_logger("resolver")


def get_projects(
    config: LookupConfig,
    client: Optional[SentryClient] = None,
    cache: Optional[ProjectCache] = None,
) -> List[Project]:
    """
    Return the organization's projects from the cache or the Sentry API.

    A readable cache is returned as-is unless ``config.clear_cache`` is set.
    Otherwise the list is fetched and written back to the cache; a failed
    write is raised rather than ignored.

    Args:
        config: Resolved lookup configuration
        client: API client to use; one is built from ``config`` if omitted
        cache: Cache to use; defaults to ``config.cache_path``
    """
    cache = cache or ProjectCache(config.cache_path)

    if not config.clear_cache:
        try:
            return cache.load()
        except CacheReadError as e:
            log.debug("cache_miss", reason=e.message, path=e.path)

    if client is None:
        with SentryClient(config.api_url, config.api_key) as owned:
            projects = owned.list_projects(config.org)
    else:
        projects = client.list_projects(config.org)

    cache.save(projects)
    return projects


def find_slug(projects: Iterable[Project], project_id: str) -> str:
    for project in projects:
        if project.id == project_id:
            return project.slug
    raise ProjectNotFoundError(project_id)


def get_slug(
    project_id: str,
    config: LookupConfig,
    client: Optional[SentryClient] = None,
    cache: Optional[ProjectCache] = None,
) -> str:
    """Resolve a project id to its slug, first match wins."""
    projects = get_projects(config, client=client, cache=cache)
    slug = find_slug(projects, project_id)
    log.debug("slug_resolved", project_id=project_id, slug=slug)
    return slug
