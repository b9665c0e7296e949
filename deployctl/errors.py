class DeployctlError(Exception):
    """Base exception for all errors of deployctl CLI"""


class InternalError(DeployctlError):
    def __init__(self) -> None:
        super().__init__(
            "Internal error occurred. Possibly, bug in client or API server\n"
            "Please, run with '-v debug' and contact support to resolve the issue"
        )


class ConfigLoadError(DeployctlError):
    def __init__(self) -> None:
        super().__init__(
            "Config file is corrupted. Unable to continue\n"
            "Please, run 'deployctl config init' to resolve the issue"
        )


class ConfigNotFoundError(DeployctlError):
    def __init__(self) -> None:
        super().__init__(
            "Unable to find configuration. The first time run?\n"
            "Please, run 'deployctl config init' first "
            "or set DEPLOYCTL_TOKEN environment variable"
        )


class ConnectionError(DeployctlError):
    def __init__(self, url: str) -> None:
        super().__init__(
            f"Network failure occurred during request to '{url}'\n"
            "Please, ensure API server is available and try again"
        )


class AuthError(DeployctlError):
    def __init__(self) -> None:

        commands = "".join(
            [
                "\n - deployctl config show",
                "\n - deployctl config set token <TOKEN>",
                "\n - deployctl config init",
            ]
        )

        super().__init__(
            "Authentication failure. Ensure, your token is valid "
            "and has access to the selected scope\n"
            f"Commands will help: {commands}"
        )


class APIError(DeployctlError):
    def __init__(self, code: str, message: str, status_code: int = 0) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
        self.status_code = status_code


class DeploymentNotFound(APIError):
    def __init__(self, id_or_url: str) -> None:
        super().__init__(
            "not_found",
            f"Can't find the deployment '{id_or_url}'",
            404,
        )
        self.id_or_url = id_or_url


class ExampleNotFound(DeployctlError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"No example found for {name}, run 'deployctl init' "
            "to see the list of available examples."
        )


class DestinationExistsError(DeployctlError):
    def __init__(self, path: str) -> None:
        super().__init__(
            f'Destination path "{path}" already exists and is not '
            "an empty directory. You may use --force or -f to override it."
        )


class DeployctlValidationError(DeployctlError):
    def __init__(self, msg: str, errors: list) -> None:
        super().__init__(msg)
        self.errors = errors


class ClientSideValidationError(DeployctlValidationError):
    def __init__(self, errors: list) -> None:
        super().__init__("Input data is invalid", errors)
