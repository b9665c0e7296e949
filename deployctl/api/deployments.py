import logging
from typing import List
from urllib.parse import quote

from deployctl.client import ApiClient
from deployctl.constants import C_PROJECT_DEPLOYMENTS_MAX
from deployctl.errors import DeploymentNotFound
from deployctl.helper import paginate, parse_response, parse_response_no_model
from deployctl.models import Deployment, ScopeContext
from deployctl.util import normalize_url

from .scope import scope_params

logger = logging.getLogger(__name__)

########################################
# Endpoints
########################################

URL_DEPLOYMENTS = "/v6/deployments"


def url_deployment(id_or_url: str):
    return f"/v13/deployments/{quote(id_or_url, safe='')}"


########################################
# Utils
########################################


def lookup_key(identifier: str):

    """Hosts and URLs are looked up in normalized form, ids as is"""

    if "." in identifier or "://" in identifier:
        return normalize_url(identifier)

    return identifier


def get_deployment(
    client: ApiClient,
    scope: ScopeContext,
    id_or_url: str,
) -> Deployment:

    url = url_deployment(lookup_key(id_or_url))
    response = client.get(url, params=scope_params(scope))

    if response.status_code == 404:
        raise DeploymentNotFound(id_or_url)

    return parse_response(response, Deployment)


def get_deployments_by_project_id(
    client: ApiClient,
    scope: ScopeContext,
    project_id: str,
    max_items: int = C_PROJECT_DEPLOYMENTS_MAX,
    follow: bool = True,
) -> List[Deployment]:

    params = {"projectId": project_id, **scope_params(scope)}

    deployments = paginate(
        client,
        URL_DEPLOYMENTS,
        Deployment,
        key="deployments",
        params=params,
        max_items=max_items,
        follow=follow,
    )

    result = list(deployments)
    logger.debug("Project '%s' has %d deployments", project_id, len(result))
    return result


def remove_deployment(
    client: ApiClient,
    scope: ScopeContext,
    deployment_id: str,
    hard: bool = False,
):
    params = scope_params(scope)
    if hard:
        params["hard"] = 1

    response = client.delete(url_deployment(deployment_id), params=params)
    parse_response_no_model(response)
