from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional

import requests

from mapcoords.constructs.projection import ProjectionDefinition
from mapcoords.projections.registry_interface import ProjectionRegistryInterface
from mapcoords.utils.exceptions import ProjectionFetchError

log = logging.getLogger(__name__)

DEFAULT_DEFINITION_URL = "https://epsg.io/{number}.proj4"
DEFAULT_TIMEOUT_SECONDS = 2.0


def definition_url(code: str) -> str:
    """
    Build the default URL serving the proj4 definition of an ``AUTH:NUMBER`` code.

    Raises:
        ValueError: If the code is not of the form ``AUTH:NUMBER``
    """
    parts = code.split(":")
    if len(parts) != 2 or not parts[1].isdigit():
        raise ValueError(f"cannot build a definition url for {code}")
    return DEFAULT_DEFINITION_URL.format(number=parts[1])


def _fetch_definition(
    registry: ProjectionRegistryInterface,
    code: str,
    url: Optional[str],
    timeout: float,
) -> ProjectionDefinition:
    try:
        url = url or definition_url(code)
        r = requests.get(url, timeout=timeout)
        if not r.status_code == requests.codes.ok:
            r.raise_for_status()
        proj4 = r.text.strip()
        if not proj4:
            raise ValueError(f"empty projection definition returned by {url}")
        definition = ProjectionDefinition(code=code, proj4=proj4)
        if definition.is_geographic():
            definition = definition._replace(units="degrees")
    except (requests.RequestException, ValueError) as e:
        log.warning("could not fetch the projection definition of %s: %s", code, e)
        raise ProjectionFetchError(f"could not fetch the definition of {code}") from e

    registry.register(definition)
    log.info("registered remote projection %s from %s", code, url)
    return definition


def fetch_remote_definition(
    code: str,
    registry: ProjectionRegistryInterface,
    url: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    executor: Optional[Executor] = None,
) -> Future:
    """
    Fetch a projection definition from a remote resource and register it.

    The request runs in the background and the returned future resolves exactly once: with
    the new ProjectionDefinition (already registered) on success, or with a
    ProjectionFetchError on any failure, in which case the registry is left unchanged.
    There is no retry; retrying is the caller's decision. A future that has not started yet
    can be cancelled with ``future.cancel()``; a caller losing interest in a running fetch
    simply ignores the result.

    Args:
        code: The CRS code to fetch, e.g. 'EPSG:3044'
        registry: The registry receiving the definition
        url: The resource serving the proj4 string. Defaults to epsg.io for the code's number.
        timeout: The request timeout in seconds. Default is 2 seconds.
        executor: The executor running the request. By default a single-use thread is used.

    Returns:
        A concurrent.futures.Future resolving to the registered ProjectionDefinition

    Examples:
        >>> from mapcoords.projections.registry import ProjectionRegistry
        >>> registry = ProjectionRegistry()
        >>> future = fetch_remote_definition("EPSG:3044", registry)
        >>> definition = future.result(timeout=5)
        >>> registry.resolve("EPSG:3044") == definition
        True
    """
    if executor is not None:
        return executor.submit(_fetch_definition, registry, code, url, timeout)

    single_use = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mapcoords-fetch")
    try:
        return single_use.submit(_fetch_definition, registry, code, url, timeout)
    finally:
        single_use.shutdown(wait=False)
