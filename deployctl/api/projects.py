from typing import Optional
from urllib.parse import quote

from deployctl.client import ApiClient
from deployctl.helper import parse_response, parse_response_no_model
from deployctl.models import Project, ScopeContext

from .scope import scope_params

########################################
# Endpoints
########################################


def url_project(id_or_name: str):
    return f"/v9/projects/{quote(id_or_name, safe='')}"


########################################
# Utils
########################################


def get_project_by_id_or_name(
    client: ApiClient,
    scope: ScopeContext,
    id_or_name: str,
) -> Optional[Project]:

    response = client.get(url_project(id_or_name), params=scope_params(scope))

    if response.status_code == 404:
        return None

    return parse_response(response, Project)


def remove_project(client: ApiClient, scope: ScopeContext, project_id: str):
    response = client.delete(url_project(project_id), params=scope_params(scope))
    parse_response_no_model(response)
