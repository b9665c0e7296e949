"""
Resolution, safety filtering and execution of deployment/project removal.

The pipeline runs in strictly sequential phases, every phase issues its
requests concurrently and collects results positionally:

    lookup -> project expansion -> alias fetch -> (confirmation) -> execution
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

from .api.aliases import get_aliases
from .api.deployments import (
    get_deployment,
    get_deployments_by_project_id,
    remove_deployment,
)
from .api.projects import get_project_by_id_or_name, remove_project
from .client import ApiClient
from .constants import (
    C_MAX_CONCURRENCY,
    C_MAX_REMOVALS,
    C_PROJECT_DEPLOYMENTS_MAX,
)
from .errors import DeployctlError, DeploymentNotFound
from .models import (
    Deployment,
    DeploymentLookup,
    LookupStatus,
    Project,
    ProjectLookup,
    ScopeContext,
)
from .util import is_valid_name, normalize_url, plural

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class RemovalPlan(BaseModel):
    deployments: List[Deployment] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    safe: bool = False

    @property
    def is_empty(self):
        return not self.deployments and not self.projects

    @property
    def exceeds_cap(self):
        return len(self.deployments) > C_MAX_REMOVALS


########################################
# Utils
########################################


def run_concurrently(fn: Callable[[T], R], items: Sequence[T]) -> List[R]:

    """
    Calls fn for every item, at most C_MAX_CONCURRENCY at a time.
    Result[i] corresponds to items[i].
    All calls settle before the first failure (if any) is raised
    """

    if not items:
        return []

    with ThreadPoolExecutor(max_workers=min(len(items), C_MAX_CONCURRENCY)) as executor:
        return list(executor.map(fn, items))


def find_invalid_name(ids: Iterable[str]) -> Optional[str]:
    return next((name for name in ids if not is_valid_name(name)), None)


def deployment_matches(deployment: Deployment, ids: Sequence[str]):
    return any(
        deployment.id == id_
        or deployment.name == id_
        or (deployment.url is not None and deployment.url == normalize_url(id_))
        for id_ in ids
    )


def project_matches(project: Project, ids: Sequence[str]):
    return any(project.id == id_ or project.name == id_ for id_ in ids)


def deployments_and_projects(
    deployments: Sequence[Deployment],
    projects: Sequence[Project],
    conjunction: str = "and",
):
    if not projects:
        return plural("deployment", len(deployments), True)

    if not deployments:
        return plural("project", len(projects), True)

    return (
        f"{plural('deployment', len(deployments), True)} "
        f"{conjunction} {plural('project', len(projects), True)}"
    )


########################################
# Lookup
########################################


def lookup_deployment(
    client: ApiClient,
    scope: ScopeContext,
    identifier: str,
) -> DeploymentLookup:

    try:
        deployment = get_deployment(client, scope, identifier)

    except DeploymentNotFound:
        return DeploymentLookup(
            identifier=identifier,
            status=LookupStatus.not_found,
        )

    except DeployctlError as e:
        logger.debug("Deployment lookup of '%s' failed: %s", identifier, e)
        return DeploymentLookup(
            identifier=identifier,
            status=LookupStatus.failed,
            error=str(e),
        )

    return DeploymentLookup(
        identifier=identifier,
        status=LookupStatus.ok,
        deployment=deployment,
    )


def lookup_project(
    client: ApiClient,
    scope: ScopeContext,
    identifier: str,
) -> ProjectLookup:

    try:
        project = get_project_by_id_or_name(client, scope, identifier)

    except DeployctlError as e:
        logger.debug("Project lookup of '%s' failed: %s", identifier, e)
        return ProjectLookup(
            identifier=identifier,
            status=LookupStatus.failed,
            error=str(e),
        )

    if project is None:
        return ProjectLookup(identifier=identifier, status=LookupStatus.not_found)

    return ProjectLookup(
        identifier=identifier,
        status=LookupStatus.ok,
        project=project,
    )


def resolve_identifiers(
    client: ApiClient,
    scope: ScopeContext,
    ids: Sequence[str],
):
    """
    Looks up every identifier both as a deployment and as a project.
    Returns matched deployments and projects (in order of identifiers)
    """

    if not ids:
        return [], []

    max_workers = min(2 * len(ids), C_MAX_CONCURRENCY)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        deployment_results = executor.map(partial(lookup_deployment, client, scope), ids)
        project_results = executor.map(partial(lookup_project, client, scope), ids)
        deployment_lookups: List[DeploymentLookup] = list(deployment_results)
        project_lookups: List[ProjectLookup] = list(project_results)

    deployments = [
        lookup.deployment
        for lookup in deployment_lookups
        if lookup.status == LookupStatus.ok
        and deployment_matches(lookup.deployment, ids)
    ]

    projects = [
        lookup.project
        for lookup in project_lookups
        if lookup.status == LookupStatus.ok and project_matches(lookup.project, ids)
    ]

    return deployments, projects


########################################
# Filtering
########################################


def expand_projects(
    client: ApiClient,
    scope: ScopeContext,
    projects: Sequence[Project],
) -> List[Deployment]:

    """Replaces projects with their deployments (aliases are not known yet)"""

    fetch = partial(
        get_deployments_by_project_id,
        client,
        scope,
        max_items=C_PROJECT_DEPLOYMENTS_MAX,
        follow=True,
    )

    project_ids = [project.id for project in projects[:C_PROJECT_DEPLOYMENTS_MAX]]

    deployments = []
    for project_deployments in run_concurrently(fetch, project_ids):
        for deployment in project_deployments:
            deployments.append(deployment.model_copy(update={"aliases": []}))

    return deployments


def exclude_project_deployments(
    deployments: Sequence[Deployment],
    projects: Sequence[Project],
) -> List[Deployment]:

    """Deployments of removed projects are removed along with them"""

    names = {project.name for project in projects}
    return [d for d in deployments if d.name not in names]


def attach_aliases(
    client: ApiClient,
    scope: ScopeContext,
    deployments: Sequence[Deployment],
    safe: bool,
) -> List[Deployment]:

    fetch = partial(get_aliases, client, scope)
    aliases = run_concurrently(fetch, [d.id for d in deployments])

    result = []
    for deployment, deployment_aliases in zip(deployments, aliases):

        # Aliased deployments are still in use
        if safe and deployment_aliases:
            logger.debug("Skip aliased deployment '%s'", deployment.id)
            continue

        result.append(deployment.model_copy(update={"aliases": deployment_aliases}))

    return result


def build_plan(
    client: ApiClient,
    scope: ScopeContext,
    ids: Sequence[str],
    safe: bool = False,
) -> RemovalPlan:

    deployments, projects = resolve_identifiers(client, scope, ids)

    if safe:
        deployments.extend(expand_projects(client, scope, projects))
        projects = []
    else:
        deployments = exclude_project_deployments(deployments, projects)

    deployments = attach_aliases(client, scope, deployments, safe)

    return RemovalPlan(deployments=deployments, projects=projects, safe=safe)


########################################
# Execution
########################################


def execute_removal(
    client: ApiClient,
    scope: ScopeContext,
    plan: RemovalPlan,
    hard: bool = False,
):
    """
    Removes everything in the plan in a single batch.
    Any failure aborts the whole run, completed removals are not rolled back
    """

    def remove(item):
        if isinstance(item, Deployment):
            remove_deployment(client, scope, item.id, hard=hard)
        else:
            remove_project(client, scope, item.id)

    run_concurrently(remove, [*plan.deployments, *plan.projects])
