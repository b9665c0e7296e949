from typing import Optional

from pydantic import BaseModel

from deployctl.client import ApiClient
from deployctl.helper import parse_response
from deployctl.models import ScopeContext

########################################
# Endpoints
########################################

URL_USER = "/v2/user"
URL_TEAMS = "/v2/teams"

########################################
# Models
########################################


class UserModel(BaseModel):
    id: str
    username: str


class TeamModel(BaseModel):
    id: str
    slug: str


########################################
# Utils
########################################


def scope_params(scope: ScopeContext):

    """Query parameters selecting the account which owns requested resources"""

    if scope.team_id:
        return {"teamId": scope.team_id}

    return {}


def get_user(client: ApiClient) -> UserModel:
    response = client.get(URL_USER)
    return parse_response(response, UserModel, "user")


def get_team(client: ApiClient, team: str) -> TeamModel:

    if team.startswith("team_"):
        response = client.get(f"{URL_TEAMS}/{team}")
    else:
        response = client.get(URL_TEAMS, params={"slug": team})

    return parse_response(response, TeamModel)


def get_scope(client: ApiClient, scope: Optional[str] = None) -> ScopeContext:

    user = get_user(client)
    scope = scope or client.scope

    if not scope or scope in (user.id, user.username):
        return ScopeContext(context_name=user.username, user_id=user.id)

    team = get_team(client, scope)

    return ScopeContext(
        context_name=team.slug,
        user_id=user.id,
        team_id=team.id,
    )
