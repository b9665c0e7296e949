from typing import List
from urllib.parse import quote

from deployctl.client import ApiClient
from deployctl.helper import parse_response
from deployctl.models import Alias, ScopeContext

from .scope import scope_params


def url_aliases(deployment_id: str):
    return f"/v2/deployments/{quote(deployment_id, safe='')}/aliases"


def get_aliases(
    client: ApiClient,
    scope: ScopeContext,
    deployment_id: str,
) -> List[Alias]:
    response = client.get(url_aliases(deployment_id), params=scope_params(scope))
    return parse_response(response, List[Alias], "aliases")
